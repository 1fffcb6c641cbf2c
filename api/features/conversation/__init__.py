"""Conversation feature package: entities, repository, service, controller, router.

Each task a counselor assigns to a student can carry one conversation thread
where both sides exchange messages and file attachments. Threads are keyed by
the selection, the task title and, optionally, the task page.
"""
