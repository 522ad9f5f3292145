"""Messages feature: dispatch to messaging platforms and cached history."""
