"""
Tests for the error handler.
"""

from skirmish.core.error_handling import CombatError, ErrorSeverity


def test_handle_records_history(error_handler):
    error = error_handler.handle("boom", ErrorSeverity.LOW, {"command": "attack"})
    assert error_handler.error_history == [error]
    assert error.context == {"command": "attack"}


def test_safe_execute_returns_default_on_failure(error_handler):
    def fail():
        raise CombatError("no off-hand", {"player": "Kit"})

    assert error_handler.safe_execute(fail, "fallback", "Could not resolve") == "fallback"
    assert error_handler.error_history[0].severity == ErrorSeverity.MEDIUM
    assert isinstance(error_handler.error_history[0].exception, CombatError)


def test_safe_execute_passes_through_results(error_handler):
    assert error_handler.safe_execute(lambda: 7, 0, "unused") == 7
    assert error_handler.error_history == []
