"""
Low-level APIs for fine-grained Nexus server management.

Each public function in this module should:

- perform a single request or script run, idempotently if possible
- raise an exception on any failures
- accept a `Nexus` client as its first argument rather than managing its own

Each function also falls into one of two groups:

- getters (prefixed with `get_` or `list_`, returns a value directly, does not modify state)
- actions (returns a `Result` object, may modify state)
"""
