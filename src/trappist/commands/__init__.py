"""
Commands - CLI command implementations.

- run:         Create a task every interval until stopped
- create-task: Create a single task and wait for its receipt
"""
