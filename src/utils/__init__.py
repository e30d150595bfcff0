"""
Utility modules for the Suggestion Box.

Cross-cutting concerns:
- Timeutils: persisted timestamp format and relative time text
- Ids: record id generation
- Export: CSV rendering and file output
- Scheduler: polling refresh loop
"""
