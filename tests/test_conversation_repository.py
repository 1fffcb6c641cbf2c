"""Tests for thread lookup and the one-thread-per-task indexes."""
from datetime import datetime, timezone

import pytest

from api.features.conversation.entities.task_conversation import (
    MessageSender,
    TaskMessage,
)
from api.features.conversation.exceptions import ConversationPersistenceError
from api.features.conversation.models import TaskKey
from api.features.conversation.repository import TaskConversationRepository


def _message(text: str) -> TaskMessage:
    return TaskMessage(sender=MessageSender.STUDENT, sender_name="Alice", text=text)


@pytest.mark.asyncio
async def test_find_thread_returns_none_when_absent(db_session):
    repository = TaskConversationRepository(db_session)

    assert await repository.find_thread(TaskKey(selection_id="S1", task_title="Essay")) is None


@pytest.mark.asyncio
async def test_create_thread_then_find(db_session):
    repository = TaskConversationRepository(db_session)
    key = TaskKey(selection_id="S1", task_title="Essay")

    created = await repository.create_thread("SVC1", key)
    found = await repository.find_thread(key)

    assert found is not None
    assert found.id == created.id
    assert found.task_page is None


@pytest.mark.asyncio
async def test_page_less_key_does_not_match_paged_thread(db_session):
    repository = TaskConversationRepository(db_session)
    await repository.create_thread("SVC1", TaskKey(selection_id="S1", task_title="Essay", task_page="p1"))

    assert await repository.find_thread(TaskKey(selection_id="S1", task_title="Essay")) is None


@pytest.mark.asyncio
async def test_duplicate_page_less_thread_is_rejected(session_factory):
    key = TaskKey(selection_id="S1", task_title="Essay")
    async with session_factory() as first:
        await TaskConversationRepository(first).create_thread("SVC1", key)

    async with session_factory() as second:
        with pytest.raises(ConversationPersistenceError):
            await TaskConversationRepository(second).create_thread("SVC1", key)


@pytest.mark.asyncio
async def test_duplicate_paged_thread_is_rejected(session_factory):
    key = TaskKey(selection_id="S1", task_title="Essay", task_page="p1")
    async with session_factory() as first:
        await TaskConversationRepository(first).create_thread("SVC1", key)

    async with session_factory() as second:
        with pytest.raises(ConversationPersistenceError):
            await TaskConversationRepository(second).create_thread("SVC1", key)


@pytest.mark.asyncio
async def test_paged_and_page_less_threads_coexist(db_session):
    repository = TaskConversationRepository(db_session)

    await repository.create_thread("SVC1", TaskKey(selection_id="S1", task_title="Essay"))
    await repository.create_thread("SVC1", TaskKey(selection_id="S1", task_title="Essay", task_page="p1"))
    await repository.create_thread("SVC1", TaskKey(selection_id="S1", task_title="Essay", task_page="p2"))

    assert await repository.count(selection_id="S1") == 3


@pytest.mark.asyncio
async def test_append_and_save_persists_in_order(session_factory):
    key = TaskKey(selection_id="S1", task_title="Essay")
    async with session_factory() as session:
        repository = TaskConversationRepository(session)
        thread = repository.build_thread("SVC1", key)
        thread = await repository.append_and_save(thread, _message("first"))
        thread = await repository.append_and_save(thread, _message("second"))

    async with session_factory() as session:
        reloaded = await TaskConversationRepository(session).find_thread(key)

    assert [m.text for m in reloaded.messages] == ["first", "second"]


@pytest.mark.asyncio
async def test_messages_with_equal_timestamps_keep_append_order(session_factory):
    key = TaskKey(selection_id="S1", task_title="Essay")
    frozen = datetime(2025, 10, 19, 12, 0, tzinfo=timezone.utc)
    async with session_factory() as session:
        repository = TaskConversationRepository(session)
        thread = repository.build_thread("SVC1", key)
        for i in range(6):
            message = _message(str(i))
            message.timestamp = frozen
            thread = await repository.append_and_save(thread, message)

    async with session_factory() as session:
        reloaded = await TaskConversationRepository(session).find_thread(key)

    assert [m.text for m in reloaded.messages] == ["0", "1", "2", "3", "4", "5"]
    assert [m.position for m in reloaded.messages] == [0, 1, 2, 3, 4, 5]
