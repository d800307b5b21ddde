#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker


class SingletonMetaClass(type):
    """
    SingletonMetaClass is for implementing singleton, pass in to the class by using metaclass=SingletonMetaClass
    """

    _instances = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super(SingletonMetaClass, cls).__call__(
                *args, **kwargs
            )
        return cls._instances[cls]


class Context(metaclass=SingletonMetaClass):
    """This class manages the database engine and sessions"""

    def __init__(self):
        self.db_base = declarative_base()
        self.conn = ""
        self.engine = None
        self._session_factory = None

    def init_session(self, connection_str: str = "sqlite:///", **engine_kwargs):
        """set up the database connections, it will use in-memory sqlite if no connection_str is used

        Args:
            connection_str (str, optional): connection string to the db. Defaults to "sqlite:///".
            engine_kwargs: passed through to sqlalchemy.create_engine
        """
        if self.engine is not None:
            self.engine.dispose()
        self.engine = create_engine(connection_str, echo=False, **engine_kwargs)
        self.conn = connection_str
        # records handed back to callers outlive their session
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_new_session(self) -> Session:
        """creates new sqlalchemy session"""
        if self._session_factory is None:
            raise RuntimeError("database engine is not initialized, call Context().init_session first")
        return self._session_factory()

    @contextmanager
    def session_scope(self):
        """creates a transactional scope around a series of operations in a new db session

        Every caller gets its own session so concurrent callers never share
        a transaction.

        Yields:
            Session: sqlalchemy session
        """
        session = self.create_new_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self):
        """create tables by using sqlalchemy context"""
        self.db_base.metadata.create_all(self.engine)

    def drop_tables(self):
        """drop tables by using sqlalchemy context"""
        self.db_base.metadata.drop_all(self.engine)

    def dispose(self):
        """release pooled connections"""
        if self.engine is not None:
            self.engine.dispose()
