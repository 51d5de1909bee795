from unittest.mock import MagicMock, patch

from energycoach.channels import (
    GRANTED, UNSUPPORTED, BellCue, InAppChannel, NativeChannel, NoopChannel, NoopCue, Notifier,
    probe_channel, probe_cue,
)


def _channel(name, permission=GRANTED):
    ch = MagicMock()
    ch.name = name
    ch.request_permission.return_value = permission
    return ch


class TestNotifier:
    def test_primary_used_first(self) -> None:
        primary, fallback = _channel("a"), _channel("b")
        assert Notifier(primary, fallback).deliver("t", "b") is True
        primary.send.assert_called_once_with("t", "b")
        fallback.send.assert_not_called()

    def test_falls_back_on_error(self) -> None:
        primary, fallback = _channel("a"), _channel("b")
        primary.send.side_effect = OSError("no dbus")
        assert Notifier(primary, fallback).deliver("t", "b") is True
        fallback.send.assert_called_once_with("t", "b")

    def test_all_channels_fail(self) -> None:
        primary, fallback = _channel("a"), _channel("b")
        primary.send.side_effect = OSError
        fallback.send.side_effect = RuntimeError
        assert Notifier(primary, fallback).deliver("t", "b") is False

    def test_permission_downgrades(self) -> None:
        primary = _channel("a", permission="denied")
        assert Notifier(primary, NoopChannel()).request_permission() == UNSUPPORTED
        assert Notifier(_channel("a"), NoopChannel()).request_permission() == GRANTED


class TestChannels:
    def test_native_calls_plyer(self) -> None:
        with patch("energycoach.channels.notification") as plyer_notification:
            NativeChannel(timeout=5).send("Lunch", "Soup")
        plyer_notification.notify.assert_called_once_with(
            title="Lunch", message="Soup", app_name="EnergyCoach", timeout=5)

    def test_in_app_calls_host(self) -> None:
        show = MagicMock()
        InAppChannel(show).send("Lunch", "Soup")
        show.assert_called_once_with("Lunch", "Soup")

    def test_probe(self) -> None:
        show = MagicMock()
        native = probe_channel(in_app=show, platform="linux")
        assert isinstance(native.primary, NativeChannel)
        assert isinstance(native.fallback, InAppChannel)

        browserless = probe_channel(in_app=show, platform="emscripten")
        assert isinstance(browserless.primary, InAppChannel)

        assert isinstance(probe_channel(platform="emscripten").primary, NoopChannel)


class TestCue:
    def test_bell(self) -> None:
        bell = MagicMock()
        BellCue(bell).emit()
        bell.assert_called_once_with()

    def test_errors_are_swallowed(self) -> None:
        bell = MagicMock(side_effect=RuntimeError("no display"))
        BellCue(bell).emit()

    def test_probe_cue(self) -> None:
        with patch("energycoach.channels.sys") as fake_sys:
            fake_sys.platform = "linux"
            assert isinstance(probe_cue(), NoopCue)
            assert isinstance(probe_cue(bell=MagicMock()), BellCue)
