"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskPriority, deadline urgency)
- task_tree.py: the forest owner; add/find/mutate/delete/toggle
- task_sort.py: display ordering of root tasks (smart / deadline / priority)
- task_notifier.py: reminder eligibility and notification responses
- task_codec.py: JSON encoding of the forest
- persistence.py: best-effort save/load of the forest and preferences
- settings_store.py: SQLite-backed key-value settings store
"""
