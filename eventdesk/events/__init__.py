"""Events and their task lists."""
