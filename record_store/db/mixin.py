#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from typing import Any, Dict

from sqlalchemy.orm import Query, Session


class Base(object):
    """Query and serialization helpers shared by every model"""

    @classmethod
    def get(cls, *criteria, session: Session) -> Query:
        """build a query on this model within session

        Args:
            criteria: filter expressions, e.g. Record.tag == "history"
            session (Session): session to query with, usually from Context().session_scope()
        """
        query = session.query(cls)
        if criteria:
            query = query.filter(*criteria)
        return query

    def to_dict(self) -> Dict[str, Any]:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
