import logging

import pytest

from ddnskit.messages import init_log_lang, log, log_str


@pytest.fixture(autouse=True)
def english():
    init_log_lang("en")
    yield
    init_log_lang("en")


def test_init_log_lang_chinese():
    assert init_log_lang("zh-CN") == "zh"


def test_init_log_lang_other_is_english():
    assert init_log_lang("fr") == "en"


def test_english_translation_with_arg():
    assert log_str("监听 %s", ":9876") == "Listening on :9876"


def test_chinese_keeps_key():
    init_log_lang("zh")
    assert log_str("监听 %s", ":9876") == "监听 :9876"


def test_translation_without_args():
    assert log_str("网络已连接") == "The network is connected"


def test_quote_verb():
    assert log_str("%q 登录成功", "1.2.3.4") == '"1.2.3.4" login successfully'


def test_int_verb():
    text = log_str("返回内容: %s ,返回状态码: %d", "body", 404)
    assert text == "Response body: body ,Response status code: 404"


def test_unknown_key_is_formatted():
    assert log_str("plain %s text", "abc") == "plain abc text"


def test_missing_argument_marker():
    assert log_str("监听 %s") == "Listening on %!s(MISSING)"


def test_percent_escape():
    assert log_str("100%% %s", "done") == "100% done"


def test_quote_escapes_newline():
    assert log_str("%q", "a\nb") == '"a\\nb"'


def test_log_writes_message(caplog):
    with caplog.at_level(logging.INFO, logger="ddnskit.messages"):
        log("网络已连接")
    assert "The network is connected" in caplog.messages