"""Enums for consistent string constants across the application."""
from enum import Enum


class Collection(str, Enum):
    CHALLANS = "challans"
    SUPPLIERS = "suppliers"
    COMPANIES = "companies"
    USERS = "users"
    COUNTERS = "counters"
    AUDIT_LOGS = "audit_logs"


class SortDirection(int, Enum):
    ASC = 1
    DESC = -1


class TimeFilter(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class AuditAction(str, Enum):
    LOGIN = "login"
    LOGOUT = "logout"
