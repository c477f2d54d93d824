"""
In-process notification backend.

- local_center.py: reminder table + polling delivery loop
- reminder_runner.py: runs the delivery loop on a background thread
"""
