"""
Tests for the service layer (the desktop app's commands).

Each call runs in its own locked transaction on the shared AppState.
"""

from datetime import date, datetime

import pytest

from study_studio.errors import (
    DatabaseError,
    EmptyUpdate,
    InvalidColor,
    InvalidDate,
    InvalidName,
    InvalidTag,
    NotFoundError,
)
from study_studio.models import TaskPriority, TaskStatus
from study_studio.schemas import TagRef, TagView, TaskView, UserView
from study_studio.services import TagService, TaskService, UserService


# ============================================================================
# USER SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_user_service(app_state):
    service = UserService(app_state)

    assert await service.get_active_users_count() == 0
    assert await service.get_active_user_id() is None

    user = await service.create_user("  Ada ")

    assert user.name == "Ada"
    assert await service.get_active_users_count() == 1
    assert await service.get_active_user_id() == user.id
    assert UserView.model_validate(user).model_dump()["status"] == "active"


@pytest.mark.asyncio
async def test_user_service_rejects_empty_name(app_state):
    with pytest.raises(InvalidName):
        await UserService(app_state).create_user("")


# ============================================================================
# TAG SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_tag_service_crud(app_state):
    service = TagService(app_state)

    exam = await service.create_tag("Exam", "#FFAA00")
    reading = await service.create_tag("Reading", "teal")

    assert (await service.get_tag(exam.id)).name == "Exam"
    assert await service.get_tag(999) is None
    assert [tag.id for tag in await service.list_tags()] == [exam.id, reading.id]

    renamed = await service.rename_tag(exam.id, "Finals")
    assert renamed.name == "Finals"

    await service.delete_tag(reading.id)
    assert [tag.name for tag in await service.list_tags()] == ["Finals"]

    with pytest.raises(NotFoundError):
        await service.delete_tag(reading.id)


@pytest.mark.asyncio
async def test_tag_service_validation(app_state):
    service = TagService(app_state)

    with pytest.raises(InvalidColor) as exc_info:
        await service.create_tag("Exam", "#GGG")
    assert exc_info.value.message == "Invalid tag color: Tag color '#GGG' is invalid"

    with pytest.raises(InvalidName):
        await service.create_tag(" ", "red")

    assert await service.list_tags() == []


@pytest.mark.asyncio
async def test_tag_service_delete_attached_tag_fails(app_state, user):
    task = await TaskService(app_state).create_task(
        "Revise", user.id, tags=[TagRef(name="Exam", color="red")]
    )
    tag_id = task.tags[0].id

    with pytest.raises(DatabaseError):
        await TagService(app_state).delete_tag(tag_id)

    assert await TagService(app_state).get_tag(tag_id) is not None


# ============================================================================
# TASK SERVICE TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_create_task_with_front_end_input(app_state, user):
    """Test: ISO due date with "Z", tags by name, priority string."""
    service = TaskService(app_state)

    task = await service.create_task(
        "Read chapter 3",
        user.id,
        description="Pages 40-62",
        due_date="2026-01-19T09:00:37Z",
        priority="High",
        tags=[TagRef(name="Exam", color="red"), TagRef(name="Reading", color="#0A0")],
    )

    assert task.id is not None
    assert task.status is TaskStatus.TODO
    assert task.priority is TaskPriority.HIGH
    assert task.due_date == datetime(2026, 1, 19, 9, 0)
    assert [tag.name for tag in task.tags] == ["Exam", "Reading"]

    view = TaskView.model_validate(task).model_dump()
    assert view["status"] == "todo"
    assert view["priority"] == "high"
    assert view["due_date"] == "2026-01-19 09:00:00"
    assert view["tags"][0] == {"id": task.tags[0].id, "name": "Exam", "color": "red"}


@pytest.mark.asyncio
async def test_create_task_reuses_tags_by_name(app_state, user):
    service = TaskService(app_state)
    first = await service.create_task("One", user.id, tags=[TagRef(name="Exam", color="red")])
    second = await service.create_task("Two", user.id, tags=[TagRef(name="Exam", color="blue")])

    assert second.tags[0].id == first.tags[0].id
    assert len(await TagService(app_state).list_tags()) == 1


@pytest.mark.asyncio
async def test_create_task_rejects_bad_due_date(app_state, user):
    service = TaskService(app_state)

    with pytest.raises(InvalidDate):
        await service.create_task("Essay", user.id, due_date="19/01/2026")

    assert await service.get_all_tasks() == []


@pytest.mark.asyncio
async def test_create_task_unknown_user(app_state):
    service = TaskService(app_state)

    with pytest.raises(NotFoundError):
        await service.create_task("Essay", 999, tags=[TagRef(name="Exam", color="red")])

    assert await service.get_all_tasks() == []
    assert await TagService(app_state).list_tags() == []


@pytest.mark.asyncio
async def test_get_task(app_state, user):
    service = TaskService(app_state)
    created = await service.create_task("Essay", user.id)

    assert (await service.get_task(created.id)).title == "Essay"
    with pytest.raises(NotFoundError):
        await service.get_task(999)


@pytest.mark.asyncio
async def test_update_task_parses_strings(app_state, user):
    service = TaskService(app_state)
    task = await service.create_task("Essay", user.id)

    updated = await service.update_task(
        task.id,
        status="in progress",
        priority="low",
        due_date="2026-02-01T18:30",
    )

    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.priority is TaskPriority.LOW
    assert updated.due_date == datetime(2026, 2, 1, 18, 30)
    assert updated.title == "Essay"


@pytest.mark.asyncio
async def test_update_task_tags_by_id(app_state, user):
    service = TaskService(app_state)
    task = await service.create_task(
        "Essay", user.id, tags=[TagRef(name="A", color="red"), TagRef(name="B", color="red")]
    )
    c = await TagService(app_state).create_tag("C", "blue")
    b = task.tags[1]

    updated = await service.update_task(
        task.id,
        tags=[TagRef(id=b.id, name=b.name, color=b.color), TagRef(id=c.id, name="C", color="blue")],
    )

    assert [tag.name for tag in updated.tags] == ["B", "C"]


@pytest.mark.asyncio
async def test_update_task_is_atomic(app_state, user):
    """Test: an unknown tag id rolls back the field changes made before it."""
    service = TaskService(app_state)
    task = await service.create_task("Essay", user.id)

    with pytest.raises(InvalidTag):
        await service.update_task(
            task.id, title="Renamed", tags=[TagRef(id=999, name="Ghost", color="gray")]
        )

    assert (await service.get_task(task.id)).title == "Essay"


@pytest.mark.asyncio
async def test_update_task_errors(app_state, user):
    service = TaskService(app_state)
    task = await service.create_task("Essay", user.id)

    with pytest.raises(EmptyUpdate):
        await service.update_task(task.id)
    with pytest.raises(InvalidTag):
        await service.update_task(task.id, tags=[TagRef(name="New", color="red")])
    with pytest.raises(InvalidDate):
        await service.update_task(task.id, due_date="tomorrow")
    with pytest.raises(NotFoundError):
        await service.update_task(999, title="Nope")


@pytest.mark.asyncio
async def test_set_task_tags(app_state, user):
    service = TaskService(app_state)
    task = await service.create_task("Essay", user.id, tags=[TagRef(name="A", color="red")])

    attached = await service.set_task_tags(
        task.id, [TagRef(name="B", color="blue"), TagRef(name="A", color="red")]
    )

    assert [tag.name for tag in attached] == ["A", "B"]
    assert [TagView.model_validate(tag).name for tag in (await service.get_task(task.id)).tags] == [
        "A",
        "B",
    ]

    with pytest.raises(NotFoundError):
        await service.set_task_tags(999, [])


@pytest.mark.asyncio
async def test_complete_task(app_state, user):
    service = TaskService(app_state)
    task = await service.create_task("Essay", user.id)

    completed = await service.complete_task(task.id)

    assert completed.status is TaskStatus.DONE


@pytest.mark.asyncio
async def test_get_tasks_for_today(app_state, user):
    service = TaskService(app_state)
    due = await service.create_task("Due", user.id, due_date="2024-06-10T08:00:00Z")
    await service.create_task("Later", user.id, due_date="2024-06-11T08:00:00Z")

    tasks = await service.get_tasks_for_today(date(2024, 6, 10))

    assert [task.id for task in tasks] == [due.id]


@pytest.mark.asyncio
async def test_delete_task(app_state, user):
    service = TaskService(app_state)
    task = await service.create_task("Essay", user.id, tags=[TagRef(name="A", color="red")])

    await service.delete_task(task.id)

    assert await service.get_all_tasks() == []
    assert len(await TagService(app_state).list_tags()) == 1
    with pytest.raises(NotFoundError):
        await service.delete_task(task.id)
