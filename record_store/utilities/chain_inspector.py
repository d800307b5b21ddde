#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Dict, List

from dependency_injector.wiring import Provide, inject

from record_store.db.container import Container
from record_store.db.services.record_service import RecordService
from record_store.utilities.datetime_format import format_ns
from record_store.utilities.log_constants import _DEFAULT_LOGGER_NAME


@inject
def describe_chain(
    host: str,
    tag: str,
    record_service: RecordService = Provide[Container.record_service],
) -> List[Dict]:
    """ Summarize every record of a chain without touching the encrypted payload

    Args:
        host (str): host uuid
        tag (str): log tag, e.g. "history"
    """
    rows = []
    for record in record_service.get_chain(host, tag):
        row = record.to_dict()
        row["size"] = len(row.pop("data"))
        row["id"] = str(row["id"])
        row["host"] = str(row["host"])
        row["parent"] = str(row["parent"])
        row["timestamp"] = format_ns(row["timestamp"])
        row["created_at"] = row["created_at"].isoformat()
        rows.append(row)
    return rows


@inject
def check_chain(
    host: str,
    tag: str,
    record_service: RecordService = Provide[Container.record_service],
) -> int:
    """ Verify a chain links up from head to tip, returns the number of records checked """
    inspector_logger = logging.getLogger(_DEFAULT_LOGGER_NAME)
    checked = record_service.verify_chain(host, tag)
    inspector_logger.info(f"{host}/{tag}: {checked} records link up to the tip")
    return checked


@inject
def describe_user(
    user_id: int,
    record_service: RecordService = Provide[Container.record_service],
) -> Dict[str, Dict[str, Dict]]:
    """ Tip and length of every chain a user owns, keyed by host then tag """
    summary = {}
    for host, tags in record_service.status(user_id).items():
        for tag, tip_id in tags.items():
            summary.setdefault(str(host), {})[tag] = {
                "tip": str(tip_id),
                "length": record_service.length(host, tag),
            }
    return summary
