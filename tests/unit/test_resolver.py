"""Unit tests for configuration resolution and mode selection"""

from __future__ import annotations

import pytest

from leapconnect.cli import parser_build
from leapconnect.common.errors import PrivilegeError, ValidationError
from leapconnect.common.types import Configuration, Mode, Scope
from leapconnect.service.resolver import (
    configuration_resolve,
    interactive_isSelected,
    privilege_check,
    scopeAnswer_parse,
)


def _root() -> int:
    return 0


def _nobody() -> int:
    return 65534


class _ScriptedPrompt:
    """Answers prompts from a fixed list and records the questions"""

    def __init__(self, answers: list[str]) -> None:
        self._answers: list[str] = list(answers)
        self.questions: list[str] = []

    def __call__(self, text: str) -> str:
        self.questions.append(text)
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)


def _resolve(argv: list[str], prompt=None, euid_get=_root) -> Configuration:
    args = parser_build().parse_args(argv)
    return configuration_resolve(args, argv, prompt_func=prompt, euid_get=euid_get)


class TestModeSelection:
    """Decision table"""

    def test_help_short_circuits(self):
        """--help wins over everything and needs nothing else"""
        config = _resolve(["--help", "--uninstall"], euid_get=_nobody)
        assert config.mode is Mode.HELP

    def test_no_args_is_interactive(self):
        """Zero arguments selects prompting"""
        assert interactive_isSelected([])
        assert not interactive_isSelected(["--debug"])

    def test_install_defaults_to_system(self, users):
        """Flags without a scope install system-wide"""
        config = _resolve(["--user", "alice", "--server", "10.0.0.1:24800"])
        assert config == Configuration("alice", "10.0.0.1:24800", Scope.SYSTEM, Mode.INSTALL)

    def test_user_level_scope(self, users):
        """--user-level selects the user scope"""
        config = _resolve(["--user", "alice", "--server", "myhost", "--user-level"])
        assert config.scope is Scope.USER

    def test_dry_run(self, users):
        """--dry-run selects DRY_RUN and does not need root"""
        config = _resolve(["--user", "alice", "--server", "myhost", "--dry-run"], euid_get=_nobody)
        assert config.mode is Mode.DRY_RUN

    def test_uninstall_without_server(self, users):
        """Uninstall does not require a server address"""
        config = _resolve(["--user", "alice", "--uninstall", "--user-level"])
        assert config.mode is Mode.UNINSTALL
        assert config.server_address is None
        assert config.scope is Scope.USER

    def test_flags_never_prompt(self, users):
        """Any recognized flag disables prompting"""
        prompt = _ScriptedPrompt(["alice", "10.0.0.1", "y"])
        with pytest.raises(ValidationError):
            _resolve(["--debug"], prompt=prompt)
        assert prompt.questions == []


class TestFlagValidation:
    """Non-interactive validation failures"""

    def test_missing_user(self, users):
        """--user is mandatory"""
        with pytest.raises(ValidationError, match="--user"):
            _resolve(["--server", "10.0.0.1"])

    def test_missing_user_for_uninstall(self, users):
        """--user is mandatory for uninstall too"""
        with pytest.raises(ValidationError, match="--user"):
            _resolve(["--uninstall"])

    def test_missing_server(self, users):
        """--server is mandatory for install"""
        with pytest.raises(ValidationError, match="--server"):
            _resolve(["--user", "alice"])

    def test_missing_server_dry_run(self, users):
        """--server is mandatory for dry-run"""
        with pytest.raises(ValidationError, match="--server"):
            _resolve(["--user", "alice", "--dry-run"])

    def test_unknown_user(self, users):
        """Unknown user aborts"""
        with pytest.raises(ValidationError, match="does not exist"):
            _resolve(["--user", "mallory", "--server", "10.0.0.1"])

    def test_bad_server(self, users):
        """Malformed server aborts"""
        with pytest.raises(ValidationError):
            _resolve(["--user", "alice", "--server", "10.0.0.256"])


class TestInteractive:
    """Prompt-driven resolution"""

    def test_full_prompt_default_scope(self, users):
        """Empty scope answer means system scope"""
        prompt = _ScriptedPrompt(["alice", "myhost:24800", ""])
        config = _resolve([], prompt=prompt)
        assert config == Configuration("alice", "myhost:24800", Scope.SYSTEM, Mode.INSTALL)
        assert len(prompt.questions) == 3

    def test_user_scope_answer(self, users):
        """'n' selects the user scope"""
        config = _resolve([], prompt=_ScriptedPrompt([" bob ", "10.0.0.1", "N"]))
        assert config.username == "bob"
        assert config.scope is Scope.USER

    def test_bad_username_stops_prompting(self, users):
        """Validation failure aborts before the next question"""
        prompt = _ScriptedPrompt(["mallory", "10.0.0.1", "y"])
        with pytest.raises(ValidationError):
            _resolve([], prompt=prompt)
        assert len(prompt.questions) == 1

    def test_eof(self, users):
        """End of input aborts"""
        with pytest.raises(ValidationError, match="No input"):
            _resolve([], prompt=_ScriptedPrompt([]))

    def test_requires_root_before_prompting(self, users):
        """Privilege is checked before asking anything"""
        prompt = _ScriptedPrompt(["alice", "10.0.0.1", "y"])
        with pytest.raises(PrivilegeError):
            _resolve([], prompt=prompt, euid_get=_nobody)
        assert prompt.questions == []


class TestScopeAnswerParse:
    """Yes/no scope answers"""

    @pytest.mark.parametrize("answer", ["", "y", "Y", "yes", " YES "])
    def test_yes(self, answer):
        """Yes or empty selects system"""
        assert scopeAnswer_parse(answer) is Scope.SYSTEM

    @pytest.mark.parametrize("answer", ["n", "No"])
    def test_no(self, answer):
        """No selects user"""
        assert scopeAnswer_parse(answer) is Scope.USER

    def test_other(self):
        """Anything else is rejected"""
        with pytest.raises(ValidationError):
            scopeAnswer_parse("maybe")


class TestPrivilegeCheck:
    """Root requirement per mode"""

    @pytest.mark.parametrize("mode", [Mode.INSTALL, Mode.UNINSTALL])
    def test_mutating_modes_need_root(self, mode):
        """Install and uninstall refuse non-root"""
        with pytest.raises(PrivilegeError):
            privilege_check(mode, _nobody)
        privilege_check(mode, _root)

    @pytest.mark.parametrize("mode", [Mode.DRY_RUN, Mode.HELP])
    def test_read_only_modes(self, mode):
        """Dry-run and help never need root"""
        privilege_check(mode, _nobody)
