"""
Services acting on the record store on behalf of users and admins.

- Lifecycle: submit, vote, comment, status changes, deletion
- Notifications: per-user event log
- Auth: registration, login, session
- Seeding: demo data
"""
