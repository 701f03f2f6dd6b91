from ulsconnect.core.enums import AttendanceMark
from ulsconnect.scoring.rules.standard_rule import StandardScoringRule


def test_defaults():
    rule = StandardScoringRule()
    assert rule.points_for(AttendanceMark.PRESENTE) == 10
    assert rule.points_for(AttendanceMark.JUSTIFICADA) == 2
    assert rule.points_for(AttendanceMark.AUSENTE) == -5


def test_from_payload_keeps_defaults_for_bad_values():
    rule = StandardScoringRule.from_payload({"presente": "15", "ausente": "nope", "justificada": None})
    assert rule.as_dict() == {"presente": 15, "justificada": 2, "ausente": -5}


def test_from_payload_accepts_missing_rules():
    assert StandardScoringRule.from_payload(None).as_dict() == StandardScoringRule().as_dict()
