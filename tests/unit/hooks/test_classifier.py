from __future__ import annotations

import pytest

from ghp_hooks.hooks.classifier import classify_exit_code
from ghp_hooks.hooks.config import HookExitCodes
from ghp_hooks.hooks.models import HookOutcome


class TestDefaultPolicy:
    def test_zero_is_success(self):
        assert classify_exit_code(0) is HookOutcome.SUCCESS

    def test_one_is_abort(self):
        assert classify_exit_code(1) is HookOutcome.ABORT

    @pytest.mark.parametrize("code", [2, 3, 42, 127, 255])
    def test_unlisted_codes_abort(self, code: int):
        assert classify_exit_code(code) is HookOutcome.ABORT

    def test_signal_kill_aborts(self):
        assert classify_exit_code(None) is HookOutcome.ABORT


class TestCustomPolicy:
    def test_warn_codes(self):
        policy = HookExitCodes(warn=[2])
        assert classify_exit_code(2, policy) is HookOutcome.WARN
        assert classify_exit_code(0, policy) is HookOutcome.SUCCESS
        assert classify_exit_code(1, policy) is HookOutcome.ABORT

    def test_override_replaces_only_given_lists(self):
        policy = HookExitCodes(success=[0, 10])
        assert classify_exit_code(10, policy) is HookOutcome.SUCCESS
        assert classify_exit_code(1, policy) is HookOutcome.ABORT

    def test_success_override_drops_zero(self):
        policy = HookExitCodes(success=[3])
        assert classify_exit_code(0, policy) is HookOutcome.ABORT
        assert classify_exit_code(3, policy) is HookOutcome.SUCCESS

    def test_empty_abort_list_still_aborts_unlisted(self):
        policy = HookExitCodes(abort=[])
        assert classify_exit_code(1, policy) is HookOutcome.ABORT

    def test_none_aborts_regardless_of_policy(self):
        policy = HookExitCodes(success=[0, 1, 2], warn=[3])
        assert classify_exit_code(None, policy) is HookOutcome.ABORT

    def test_overlap_prefers_success_then_warn(self):
        policy = HookExitCodes(success=[5], warn=[5, 6], abort=[5, 6])
        assert classify_exit_code(5, policy) is HookOutcome.SUCCESS
        assert classify_exit_code(6, policy) is HookOutcome.WARN
