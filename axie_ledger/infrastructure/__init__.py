"""Infrastructure — database sessions, repositories, migrations and logging.

Invariants:
    - Every IO concern of the service lives here; core/ never imports it
"""
