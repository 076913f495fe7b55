"""Tests for token-guarded notices and answer auto-hide."""

from tracelens_core.commands import ArmTimer
from tracelens_core.notify import ANSWER, NOTICE, Notifier


def test_post_arms_notice_timer():
    notifier = Notifier(notice_timeout=2.5)
    timer = notifier.post("Saved")
    assert timer == ArmTimer(NOTICE, 1, 2.5)
    assert notifier.notice == "Saved"


def test_notice_expires_on_its_own_token():
    notifier = Notifier()
    timer = notifier.post("Saved")
    assert notifier.expire(timer.kind, timer.token)
    assert notifier.notice is None


def test_superseded_notice_timer_is_ignored():
    notifier = Notifier()
    first = notifier.post("one")
    notifier.post("two", "error")
    assert not notifier.expire(first.kind, first.token)
    assert notifier.notice == "two"
    assert notifier.notice_level == "error"


def test_second_answer_survives_first_timer():
    notifier = Notifier(answer_timeout=20)
    first = notifier.show_answer("X")
    second = notifier.show_answer("Y")
    assert not notifier.expire(ANSWER, first.token)
    assert notifier.answer == "Y"
    assert notifier.answer_visible
    assert notifier.expire(ANSWER, second.token)
    assert not notifier.answer_visible
    assert notifier.answer == "Y"


def test_toggle_keeps_timer_armed():
    notifier = Notifier()
    timer = notifier.show_answer("X")
    assert notifier.toggle_answer()
    assert not notifier.answer_visible
    assert notifier.toggle_answer()
    assert notifier.expire(timer.kind, timer.token)
    assert not notifier.answer_visible


def test_toggle_without_answer_is_noop():
    notifier = Notifier()
    assert not notifier.toggle_answer()
    assert not notifier.answer_visible


def test_clear_invalidates_pending_timers():
    notifier = Notifier()
    notice = notifier.post("hello")
    answer = notifier.show_answer("X")
    notifier.clear()
    assert notifier.answer is None
    later = notifier.post("new")
    assert not notifier.expire(notice.kind, notice.token)
    assert not notifier.expire(answer.kind, answer.token)
    assert notifier.notice == "new"
    assert later.token != notice.token
