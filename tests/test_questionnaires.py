import pytest
from fastapi import HTTPException

from sito.domain.questionnaires.schemas import FieldCreate, FieldUpdate, QuestionnaireCreate
from sito.domain.questionnaires.service import QuestionnaireService
from sito.models import QuestionnaireField

LEVEL_FIELD = {
    "field_type": "select",
    "label": "Experience level",
    "required": True,
    "options": ["Beginner", "Intermediate", "Advanced"],
}


class TestSchemaEditing:
    def test_second_questionnaire_for_same_workflow_conflicts(self, db, owner, make_questionnaire):
        make_questionnaire(owner, "appointment")

        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).create_schema(
                QuestionnaireCreate(workflow_type="appointment"), owner
            )
        assert exc.value.status_code == 409
        assert "already have a questionnaire" in exc.value.detail

    def test_owner_may_have_one_per_workflow(self, db, owner, make_questionnaire):
        make_questionnaire(owner, "appointment")
        make_questionnaire(owner, "course_interest")
        assert len(QuestionnaireService(db).list_schemas(owner)) == 2

    def test_fields_are_appended_in_order(self, db, owner, make_questionnaire):
        questionnaire = make_questionnaire(
            owner,
            fields=[
                {"field_type": "text", "label": "Name"},
                LEVEL_FIELD,
                {"field_type": "textarea", "label": "Goals"},
            ],
        )
        rendered = QuestionnaireService(db).render(questionnaire)
        assert [f.label for f in rendered] == ["Name", "Experience level", "Goals"]
        assert [f.order_index for f in rendered] == [0, 1, 2]

    def test_choice_field_needs_an_option(self):
        with pytest.raises(ValueError):
            FieldCreate(field_type="radio", label="Pick", options=["  ", ""])

    def test_text_field_drops_options(self):
        field = FieldCreate(field_type="text", label="Name", options=["ignored"])
        assert field.options is None

    def test_changing_type_to_choice_requires_options(self, db, owner, make_questionnaire):
        questionnaire = make_questionnaire(owner, fields=[{"field_type": "text", "label": "Name"}])
        field = questionnaire.fields[0]

        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).update_field(
                questionnaire.id, field.id, FieldUpdate(field_type="checkbox"), owner
            )
        assert exc.value.status_code == 400

    def test_other_owners_cannot_edit(self, db, owner, member, make_questionnaire):
        questionnaire = make_questionnaire(owner)
        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).add_field(
                questionnaire.id, FieldCreate(field_type="text", label="Sneaky"), member
            )
        assert exc.value.status_code == 404


class TestMoveField:
    @pytest.fixture
    def questionnaire(self, make_questionnaire, owner):
        return make_questionnaire(
            owner,
            fields=[
                {"field_type": "text", "label": "A"},
                {"field_type": "text", "label": "B"},
                {"field_type": "text", "label": "C"},
            ],
        )

    def order_of(self, db, questionnaire):
        fields = (
            db.query(QuestionnaireField)
            .filter(QuestionnaireField.questionnaire_id == questionnaire.id)
            .all()
        )
        return {f.label: f.order_index for f in fields}

    def test_move_down_swaps_only_the_neighbour(self, db, owner, questionnaire):
        before = self.order_of(db, questionnaire)
        field_a = next(f for f in questionnaire.fields if f.label == "A")

        rendered = QuestionnaireService(db).move_field(questionnaire.id, field_a.id, "down", owner)

        after = self.order_of(db, questionnaire)
        assert [f.label for f in rendered] == ["B", "A", "C"]
        assert after["A"] == before["B"]
        assert after["B"] == before["A"]
        assert after["C"] == before["C"]

    def test_move_up_from_the_middle(self, db, owner, questionnaire):
        field_c = next(f for f in questionnaire.fields if f.label == "C")
        rendered = QuestionnaireService(db).move_field(questionnaire.id, field_c.id, "up", owner)
        assert [f.label for f in rendered] == ["A", "C", "B"]

    def test_cannot_move_past_either_end(self, db, owner, questionnaire):
        first = next(f for f in questionnaire.fields if f.label == "A")
        last = next(f for f in questionnaire.fields if f.label == "C")
        service = QuestionnaireService(db)

        with pytest.raises(HTTPException) as exc:
            service.move_field(questionnaire.id, first.id, "up", owner)
        assert exc.value.status_code == 400

        with pytest.raises(HTTPException) as exc:
            service.move_field(questionnaire.id, last.id, "down", owner)
        assert exc.value.status_code == 400

        assert self.order_of(db, questionnaire) == {"A": 0, "B": 1, "C": 2}


class TestSubmit:
    def test_missing_required_select_is_rejected(self, db, owner, member, make_questionnaire):
        questionnaire = make_questionnaire(
            owner, fields=[{"field_type": "text", "label": "Name"}, LEVEL_FIELD]
        )
        name_field = questionnaire.fields[0]

        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).submit(questionnaire.id, member, {name_field.id: "Sam"})

        assert exc.value.status_code == 400
        assert exc.value.detail == "Please fill in the required field: Experience level"

    def test_valid_submission_is_stored(self, db, owner, member, make_questionnaire):
        questionnaire = make_questionnaire(owner, fields=[LEVEL_FIELD])
        level = questionnaire.fields[0]

        response = QuestionnaireService(db).submit(questionnaire.id, member, {level.id: "Beginner"})

        assert response.respondent_id == member.id
        assert response.answers == {level.id: "Beginner"}

    def test_inactive_questionnaire_refuses_submissions(self, db, owner, member, make_questionnaire):
        questionnaire = make_questionnaire(owner)
        service = QuestionnaireService(db)
        service.set_active(questionnaire.id, False, owner)

        assert service.get_schema(owner.id, "course_interest") is None
        with pytest.raises(HTTPException) as exc:
            service.submit(questionnaire.id, member, {})
        assert exc.value.status_code == 400

    def test_responses_cannot_be_edited(self, db, owner, member, make_questionnaire):
        questionnaire = make_questionnaire(owner, fields=[{"field_type": "text", "label": "Name"}])
        response = QuestionnaireService(db).submit(questionnaire.id, member, {})

        response.answers = {"tampered": "yes"}
        with pytest.raises(ValueError, match="immutable"):
            db.commit()
        db.rollback()


class TestVerifyResponse:
    def test_response_from_someone_else_is_refused(
        self, db, owner, member, make_profile, make_questionnaire
    ):
        questionnaire = make_questionnaire(owner)
        response = QuestionnaireService(db).submit(questionnaire.id, member, {})
        stranger = make_profile("Stranger")

        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).verify_response(response.id, stranger.id, owner.id)
        assert exc.value.status_code == 400

    def test_response_for_another_owner_is_refused(
        self, db, owner, member, make_profile, make_questionnaire
    ):
        other_owner = make_profile("Other Owner")
        questionnaire = make_questionnaire(other_owner)
        response = QuestionnaireService(db).submit(questionnaire.id, member, {})

        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).verify_response(response.id, member.id, owner.id)
        assert exc.value.status_code == 400

    def test_response_for_another_workflow_is_refused(self, db, owner, member, make_questionnaire):
        questionnaire = make_questionnaire(owner, "appointment")
        response = QuestionnaireService(db).submit(questionnaire.id, member, {})

        with pytest.raises(HTTPException) as exc:
            QuestionnaireService(db).verify_response(
                response.id, member.id, owner.id, workflow_type="course_interest"
            )
        assert exc.value.status_code == 400
        assert exc.value.detail == "Questionnaire response is for a different workflow"

        verified = QuestionnaireService(db).verify_response(
            response.id, member.id, owner.id, workflow_type="appointment"
        )
        assert verified.id == response.id
