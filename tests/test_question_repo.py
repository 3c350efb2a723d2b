"""Tests for the question store: CRUD, ordering, slot swaps and reset."""

import pytest
from pydantic import ValidationError

from tsbapp.errors import QuestionNotFoundError, ResetKeyError
from tsbapp.infrastructure.repositories.question_repo_impl import (
    count_questions,
    delete_question,
    get_question_by_id,
    list_questions,
    reset_questions,
    update_question,
)
from tsbapp.presentation.schemas.question_schema import QuestionUpdate


class TestCrud:
    def test_create_and_get(self, db, make_question) -> None:
        created = make_question(choices=["a", "b"])
        fetched = get_question_by_id(db, created.id)
        assert fetched.question == "What is the SI unit of force?"
        assert fetched.choices == ["a", "b"]
        assert fetched.created_at is not None

    def test_get_missing_raises_not_found(self, db) -> None:
        with pytest.raises(QuestionNotFoundError):
            get_question_by_id(db, 999)

    def test_delete(self, db, make_question) -> None:
        question = make_question()
        delete_question(db, question.id)
        assert count_questions(db) == 0
        with pytest.raises(QuestionNotFoundError):
            delete_question(db, question.id)


class TestListing:
    def test_sorted_by_round_then_subject(self, db, make_question) -> None:
        make_question(round=2, subject="Physics")
        make_question(round=1, subject="Physics")
        make_question(round=1, subject="Biology")
        assert [(q.round, q.subject) for q in list_questions(db)] == [
            (1, "Biology"),
            (1, "Physics"),
            (2, "Physics"),
        ]

    def test_filter_by_round_and_subject(self, db, make_question) -> None:
        make_question(round=3, subject="Math")
        make_question(round=3, subject="Energy")
        make_question(round=4, subject="Math")
        assert len(list_questions(db, round=3)) == 2
        assert [q.subject for q in list_questions(db, round=3, subject="Math")] == ["Math"]


class TestSwap:
    def test_moving_onto_occupied_slot_swaps_positions(self, db, make_question) -> None:
        a = make_question(question_number=1, question="A")
        b = make_question(question_number=2, question="B")

        update_question(db, a.id, QuestionUpdate(question_number=2))

        a, b = get_question_by_id(db, a.id), get_question_by_id(db, b.id)
        assert (a.question, a.question_number) == ("A", 2)
        assert (b.question, b.question_number) == ("B", 1)

    def test_swap_exchanges_the_whole_slot(self, db, make_question) -> None:
        a = make_question(subject="Biology", round=1, question_role="Tossup", question_number=1)
        b = make_question(subject="Chemistry", round=2, question_role="Bonus", question_number=3)

        update_question(
            db,
            a.id,
            QuestionUpdate(subject="Chemistry", round=2, question_role="Bonus", question_number=3),
        )

        assert get_question_by_id(db, a.id).slot == ("Chemistry", 2, "Bonus", 3)
        assert get_question_by_id(db, b.id).slot == ("Biology", 1, "Tossup", 1)

    def test_moving_onto_empty_slot_is_plain_update(self, db, make_question) -> None:
        a = make_question(question_number=1)
        b = make_question(question_number=2)

        update_question(db, a.id, QuestionUpdate(question_number=5))

        assert get_question_by_id(db, a.id).question_number == 5
        assert get_question_by_id(db, b.id).question_number == 2

    def test_editing_text_leaves_slot_alone(self, db, make_question) -> None:
        a = make_question(question_number=4)
        updated = update_question(db, a.id, QuestionUpdate(answer="kg m/s^2"))
        assert updated.answer == "kg m/s^2"
        assert updated.question_number == 4

    def test_invalid_edit_changes_nothing(self, db, make_question) -> None:
        a = make_question(question_number=1)
        b = make_question(question_number=2)

        with pytest.raises(ValidationError):
            update_question(db, a.id, QuestionUpdate(question_number=2, answer="   "))

        assert get_question_by_id(db, a.id).question_number == 1
        assert get_question_by_id(db, b.id).question_number == 2

    def test_update_missing_raises_not_found(self, db) -> None:
        with pytest.raises(QuestionNotFoundError):
            update_question(db, 42, QuestionUpdate(answer="x"))


class TestReset:
    def test_wrong_key_keeps_everything(self, db, make_question) -> None:
        make_question()
        make_question(question_number=2)
        with pytest.raises(ResetKeyError):
            reset_questions(db, "nope", expected_key="secret")
        assert count_questions(db) == 2

    def test_empty_key_is_rejected(self, db, make_question) -> None:
        make_question()
        with pytest.raises(ResetKeyError):
            reset_questions(db, "", expected_key="secret")
        assert count_questions(db) == 1

    def test_correct_key_deletes_all(self, db, make_question) -> None:
        make_question()
        make_question(question_number=2)
        assert reset_questions(db, "secret", expected_key="secret") == 2
        assert count_questions(db) == 0
