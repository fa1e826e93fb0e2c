"""BuJo task list client.

This package contains the Streamlit front end for a BulletJournal backend:
- Parses projects, tasks and notifications from the REST API.
- Renders active and completed tasks with a per-task action menu.
- Sends complete / uncomplete / delete requests in the background and
  re-fetches the lists once they settle.
"""
