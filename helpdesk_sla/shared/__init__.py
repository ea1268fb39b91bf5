"""
Shared Kernel Module
====================

Generic infrastructure shared by every module: structured logging and
API middleware.

DO NOT add SLA business logic to the shared kernel.
"""
