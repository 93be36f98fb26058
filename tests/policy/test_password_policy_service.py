# -*- coding: utf-8 -*-
"""端到端：校验入口（规则 + 历史 + 报告）。"""
import pytest

from constants.password_rules import ViolationKind
from extensions.history_database import HistoryDatabase
from models.identity import UserIdentity
from services.history_service import PasswordHistoryGate
from services.password_policy_service import PasswordPolicyService
from utils.password import password_fingerprint


def _kinds(verdict):
    return [v.kind for v in verdict.violations]


@pytest.fixture()
def hossain():
    return UserIdentity(username="hossain", attributes={"cn": ["Shahadat Hossain Dewan"]})


def test_scenario_a_forbidden_name_token(make_service, hossain):
    verdict = make_service().validate(hossain, "shahadat123456")

    assert verdict.accepted is False
    forbidden = [v for v in verdict.violations if v.kind is ViolationKind.FORBIDDEN_WORD]
    assert forbidden[0].params == ("shahadat",)
    assert "The password must not contain parts of your name or username (found: shahadat)." in verdict.lines
    # 只有数字与小写两组
    assert ViolationKind.COMPLEXITY in _kinds(verdict)
    assert ViolationKind.MIN_LENGTH not in _kinds(verdict)


def test_scenario_b_null_password(make_service, fake_repository, hossain):
    verdict = make_service(fake_repository).validate(hossain, None)

    assert verdict.accepted is False
    assert _kinds(verdict) == [ViolationKind.PASSWORD_REQUIRED]
    assert verdict.lines == ("A password is required.",)
    assert fake_repository.count_calls == 0
    assert fake_repository.rows == []


def test_scenario_c_strong_password_accepted(make_service, hossain):
    verdict = make_service().validate(hossain, "MyStr0ng!Pass")

    assert verdict.accepted is True
    assert verdict.message is None


def test_scenario_d_disallowed_plus(make_service, hossain):
    verdict = make_service().validate(hossain, "Valid+Pass123")

    assert verdict.accepted is False
    assert _kinds(verdict) == [ViolationKind.DISALLOWED_CHARS]
    assert verdict.lines == ("The password contains characters that are not allowed: +",)


def test_reused_password_rejected_first_even_if_otherwise_valid(make_service, fake_repository, hossain):
    fake_repository.rows.append(("hossain", password_fingerprint("MyStr0ng!Pass"), "10.0.0.1"))

    verdict = make_service(fake_repository).validate(hossain, "MyStr0ng!Pass")

    assert _kinds(verdict) == [ViolationKind.HISTORY_REUSE]
    assert verdict.lines[0].startswith("This password has already been used")


def test_history_violation_listed_before_other_rules(make_service, fake_repository, hossain):
    fake_repository.rows.append(("hossain", password_fingerprint("short"), "10.0.0.1"))

    verdict = make_service(fake_repository).validate(hossain, "short")

    assert _kinds(verdict)[:2] == [ViolationKind.HISTORY_REUSE, ViolationKind.MIN_LENGTH]


def test_store_error_on_check_rejects(make_service, make_repository, store_error, hossain):
    repository = make_repository(fail_on_count=store_error())

    verdict = make_service(repository).validate(hossain, "MyStr0ng!Pass")

    assert _kinds(verdict) == [ViolationKind.HISTORY_REUSE]
    assert repository.rows == []


def test_accepted_password_is_recorded_with_client_ip(make_service, fake_repository, hossain):
    verdict = make_service(fake_repository).validate(hossain, "MyStr0ng!Pass", client_ip="172.16.0.9")

    assert verdict.accepted is True
    assert fake_repository.rows == [("hossain", password_fingerprint("MyStr0ng!Pass"), "172.16.0.9")]


def test_rejected_password_is_not_recorded(make_service, fake_repository, hossain):
    make_service(fake_repository).validate(hossain, "Valid+Pass123")
    assert fake_repository.rows == []


def test_store_error_on_record_does_not_fail_change(make_service, make_repository, store_error, hossain):
    repository = make_repository(fail_on_add=store_error())

    verdict = make_service(repository).validate(hossain, "MyStr0ng!Pass")

    assert verdict.accepted is True


def test_unexpected_error_on_record_does_not_fail_change(make_service, make_repository, hossain):
    repository = make_repository(fail_on_add=RuntimeError("driver bug"))

    verdict = make_service(repository).validate(hossain, "MyStr0ng!Pass")

    assert verdict.accepted is True
    assert verdict.message is None


def test_unconfigured_store_never_checks_nor_records(catalog, fake_repository, hossain):
    gate = PasswordHistoryGate(HistoryDatabase(), fake_repository)
    service = PasswordPolicyService(catalog=catalog, history_gate=gate)

    assert service.validate(hossain, "MyStr0ng!Pass").accepted is True
    assert fake_repository.count_calls == 0
    assert fake_repository.rows == []


def test_anonymous_validation_skips_history(make_service, fake_repository):
    verdict = make_service(fake_repository).validate(None, "MyStr0ng!Pass")

    assert verdict.accepted is True
    assert fake_repository.count_calls == 0
    assert fake_repository.rows == []


def test_digit_run_reported_before_username(make_service):
    identity = UserIdentity(username="ana20240", first_name="Ana", last_name="Souza")

    verdict = make_service().validate(identity, "Xana20240#Souza")

    forbidden = [v for v in verdict.violations if v.kind is ViolationKind.FORBIDDEN_WORD]
    assert forbidden[0].params == ("20240",)


def test_first_and_last_name_used_without_ldap_attributes(make_service):
    identity = UserIdentity(username="jdoe", first_name="Maria", last_name="dos Anjos")

    verdict = make_service().validate(identity, "Secret#ANJOS99")

    forbidden = [v for v in verdict.violations if v.kind is ViolationKind.FORBIDDEN_WORD]
    assert forbidden[0].params == ("anjos",)


@pytest.mark.parametrize("configured, expected", [(None, 12), ("abc", 12), ("0", 12), ("-3", 12), ("16", 16), (8, 8)])
def test_min_length_configuration(make_service, configured, expected):
    assert make_service(min_length=configured).min_length == expected


def test_portuguese_messages_from_profile_locale(make_service):
    identity = UserIdentity(username="msilva", locale="pt-BR")

    verdict = make_service().validate(identity, "curta")

    assert verdict.header == "A senha não cumpre os requisitos:"
    assert "O comprimento mínimo é de 12 caracteres (atual: 5)." in verdict.lines


def test_portuguese_messages_from_language_hint(make_service):
    verdict = make_service().validate(None, "curta", language_hint="pt-PT,pt;q=0.9")
    assert verdict.header == "A senha não cumpre os requisitos:"


def test_unexpected_error_returns_generic_rejection(monkeypatch, make_service, hossain):
    def _boom(*args, **kwargs):
        raise RuntimeError("tokenizer exploded")

    monkeypatch.setattr("services.password_policy_service.build_forbidden_tokens", _boom)

    verdict = make_service().validate(hossain, "MyStr0ng!Pass")

    assert verdict.accepted is False
    assert verdict.message == "The password does not meet the requirements:"


def test_describe_policy(make_service):
    info = make_service(min_length="14").describe()

    assert info == {
        "id": "custom-password-policy",
        "display_name": "Custom Password Policy",
        "config_type": "int",
        "default_value": "12",
        "min_length": 14,
        "history_enabled": False,
    }
