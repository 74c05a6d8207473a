"""
Service layer abstraction.

Each service encapsulates the store operations for a domain so that the
API handlers only deal with guards, forms, notices and redirects.
"""
