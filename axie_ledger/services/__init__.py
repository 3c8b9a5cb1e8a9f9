"""Services — orchestrate core rules around infrastructure transactions."""
