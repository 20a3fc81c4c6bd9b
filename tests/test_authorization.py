"""Tests for the authorization checkpoint."""

import logging

import pytest

from hookflow import (
    AuthorizationMap,
    CheckpointStage,
    DefinitionAuthorizer,
    DuplicateDeclarationError,
    MalformedHookError,
    Options,
)

from sample_contexts import make_context, recording, recording_authorization, recording_primary


@pytest.fixture
def context_cls():
    cls = make_context()
    cls.definition.action("create", block=recording_primary)
    cls.definition.action("update", block=recording_primary)
    return cls


class TestDeclaringAuthorization:
    def test_with_action(self, context_cls):
        context_cls.definition.authorize("create", block=recording_authorization("create"))
        assert "create" in context_cls.definition.authorizations.keys()

    def test_without_action(self, context_cls):
        context_cls.definition.authorize(block=recording_authorization("default"))
        assert None in context_cls.definition.authorizations.keys()

    def test_duplicate_action_raises(self, context_cls):
        context_cls.definition.authorize("create", block=recording_authorization())
        with pytest.raises(DuplicateDeclarationError, match="WidgetContext"):
            context_cls.definition.authorize("create", block=recording_authorization())

    def test_duplicate_default_raises(self, context_cls):
        context_cls.definition.authorize(block=recording_authorization())
        with pytest.raises(DuplicateDeclarationError):
            context_cls.definition.authorize(with_="can_anything")

    def test_missing_body_raises(self, context_cls):
        with pytest.raises(MalformedHookError):
            context_cls.definition.authorize("create")


class TestAuthorize:
    def test_uses_default(self, context_cls, recorder):
        context_cls.definition.authorize(block=recording_authorization("default"))
        context_cls().authorize("create", recorder=recorder)
        assert recorder.calls == ["default"]

    def test_uses_configured_action(self, context_cls, recorder):
        context_cls.definition.authorize("create", block=recording_authorization("create"))
        context_cls().authorize("create", recorder=recorder)
        assert recorder.calls == ["create"]

    def test_action_takes_precedence_over_default(self, context_cls, recorder):
        context_cls.definition.authorize(block=recording_authorization("default"))
        context_cls.definition.authorize("create", block=recording_authorization("create"))
        context_cls().authorize("create", recorder=recorder)
        assert recorder.calls == ["create"]

    def test_unconfigured_action_does_nothing(self, context_cls, recorder):
        context_cls.definition.authorize("create", block=recording_authorization("create"))
        assert context_cls().authorize("update", recorder=recorder) is True
        assert recorder.calls == []

    def test_unconfigured_action_logs_notice(self, context_cls, caplog):
        with caplog.at_level(logging.INFO, logger="hookflow.authorization"):
            context_cls().authorize("update")
        assert "No authorization configured for update in WidgetContext" in caplog.text

    def test_notice_can_be_disabled(self, caplog):
        authorizer = DefinitionAuthorizer(AuthorizationMap(), log_unconfigured=False)
        with caplog.at_level(logging.INFO, logger="hookflow.authorization"):
            assert authorizer.authorize("update", None, Options()) is True
        assert caplog.text == ""

    def test_method_authorization(self, recorder):
        cls = make_context(can_create=lambda self, **o: o["recorder"].record("method") or "ok")
        cls.definition.action("create", block=recording_primary)
        cls.definition.authorize("create", with_="can_create")
        assert cls().authorize("create", recorder=recorder) == "ok"
        assert recorder.calls == ["method"]

    @pytest.mark.parametrize("decision", [False, None, 0, "denied"])
    def test_decision_is_returned_as_is(self, context_cls, recorder, decision):
        context_cls.definition.authorize(block=recording_authorization(decision=decision))
        context = context_cls()
        assert context.authorize("create", recorder=recorder) == decision
        assert context.last_authorization == decision

    def test_block_receives_context(self, context_cls):
        seen = []
        context_cls.definition.authorize(block=lambda context, **o: seen.append(context) or True)
        context = context_cls(entity="widget")
        context.authorize("create")
        assert seen == [context]
        assert seen[0].entity == "widget"


class TestCheckpointsInPipeline:
    def test_checkpoint_runs_twice(self, context_cls, recorder):
        context_cls.definition.authorize(block=recording_authorization())
        context_cls().create(recorder=recorder)
        assert recorder.calls.count("authorize") == 2

    def test_denial_does_not_halt_pipeline(self, context_cls, recorder):
        context_cls.definition.authorize(block=recording_authorization(decision=False))
        context_cls.definition.after("create", block=recording("after"))
        context_cls().create(recorder=recorder)
        assert recorder.calls == ["authorize", "authorize", "primary", "after"]

    def test_records_last_checkpoint(self, context_cls, recorder):
        stages = []

        def observe(context, **options):
            stages.append(context.last_checkpoint)
            return options

        context_cls.definition.before("create", block=observe)
        context_cls.definition.after("create", block=observe)
        context = context_cls()
        assert context.last_checkpoint is None
        context.create(recorder=recorder)
        assert stages == [CheckpointStage.SETUP, CheckpointStage.BEFORE]
        assert context.last_checkpoint is CheckpointStage.BEFORE

    def test_hooks_can_halt_on_denial(self, context_cls, recorder):
        context_cls.definition.authorize(block=recording_authorization(decision=False))

        def enforce(context, **options):
            if not context.last_authorization:
                raise PermissionError("not allowed")
            return options

        context_cls.definition.before("create", block=enforce)
        with pytest.raises(PermissionError):
            context_cls().create(recorder=recorder)
        assert "primary" not in recorder.calls

    def test_disabled_authorization_skips_checkpoint(self, context_cls, recorder):
        context_cls.definition.authorize(block=recording_authorization())
        context = context_cls(check_authorization=False)
        context.create(recorder=recorder)
        assert recorder.calls == ["primary"]
        assert context.last_checkpoint is None
        assert context.authorize("create", recorder=recorder) is True

    def test_custom_authorizer(self, context_cls, recorder):
        class Deny:
            def __init__(self):
                self.actions = []

            def authorize(self, action, context, options):
                self.actions.append((action, options["recorder"] is recorder))
                return False

        authorizer = Deny()
        context = context_cls(authorizer=authorizer)
        context.update(recorder=recorder)
        assert authorizer.actions == [("update", True), ("update", True)]
        assert context.last_authorization is False
