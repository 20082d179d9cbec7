from aigit_core.models import CommitMessage, CommitRecord, ReviewResult, capitalize_first
from aigit_core.normalizer import parse_commit_message


class TestCommitMessage:
    def test_header_variants(self):
        assert CommitMessage(type="feat", scope="ui", subject="x").header() == "feat(ui): x"
        assert CommitMessage(type="feat", subject="x").header() == "feat: x"
        assert CommitMessage(subject="x").header() == "x"

    def test_assemble_skips_empty_parts(self):
        message = CommitMessage(type="fix", subject="y", footer="Closes #1")
        assert message.assemble() == "fix: y\n\nCloses #1"

    def test_with_ticket_updates_subject_and_full_message(self):
        message = parse_commit_message("feat(auth): add login\n\nUses OAuth.")
        ticketed = message.with_ticket("1234")
        assert ticketed.subject == "1234-add login"
        assert ticketed.full_message == "feat(auth): 1234-add login\n\nUses OAuth."
        # The original is left untouched.
        assert message.subject == "add login"

    def test_with_ticket_on_plain_message(self):
        message = CommitMessage(type="fix", subject="update app.py", full_message="Update app.py")
        assert message.with_ticket("42").full_message == "42-update app.py"

    def test_empty_ticket_is_a_no_op(self):
        message = CommitMessage(subject="x", full_message="x")
        assert message.with_ticket("") is message


def test_capitalize_first():
    assert capitalize_first("update README") == "Update README"
    assert capitalize_first("") == ""


def test_short_hash():
    assert CommitRecord("0123456789abcdef", "a", "d", "m").short_hash == "0123456"


def test_review_result_is_empty():
    assert ReviewResult().is_empty
    assert not ReviewResult(summary="ok").is_empty
