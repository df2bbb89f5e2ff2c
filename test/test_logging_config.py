import structlog

from template_forge.utils.logging_config import configure_logging


def test_console_renderer_by_default(mocker) -> None:
    configure_spy = mocker.patch.object(structlog, "configure")
    basic_config = mocker.patch("logging.basicConfig")

    configure_logging("debug")

    basic_config.assert_called_once()
    assert basic_config.call_args.kwargs["level"] == 10
    processors = configure_spy.call_args.kwargs["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_json_renderer(mocker) -> None:
    configure_spy = mocker.patch.object(structlog, "configure")
    mocker.patch("logging.basicConfig")

    configure_logging("INFO", json_format=True)

    processors = configure_spy.call_args.kwargs["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_unknown_level_falls_back_to_info(mocker) -> None:
    mocker.patch.object(structlog, "configure")
    basic_config = mocker.patch("logging.basicConfig")

    configure_logging("chatty")

    assert basic_config.call_args.kwargs["level"] == 20
