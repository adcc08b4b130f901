"""
Task values consumed by the persistence layer.

- task_models.py: Task, TaskDependency and their value types
"""
