_DEFAULT_LOGGER_NAME = "record_store"
