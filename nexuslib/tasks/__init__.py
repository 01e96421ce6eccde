"""
Higher-level methods to manage server resources without REST endpoints of their own.

Each public function in this module should:

- perform a complete task, as needed by a script or user action
- avoid non-idempotent calls unless required by a prior state change
- leave no temporary server-side state behind
"""
