import pytest

from alephkit.flooder_config import FlooderConfig, parse_config, read_phrase


def test_defaults():
    config = parse_config([])
    assert config == FlooderConfig()
    assert config.nodes == ["127.0.0.1:9944"]
    assert config.transactions == 10000
    assert config.first_account_in_range == 0
    assert config.phrase is None and config.seed is None
    assert not config.generate_txs and not config.store_txs and not config.submit_only


def test_options_are_parsed():
    config = parse_config(
        [
            "--nodes", "a:1", "b:2",
            "--transactions", "313",
            "--seed", "//Alice",
            "--skip-initialization",
            "--generate-txs",
            "--tx-store-path", "/tmp/tx_store",
            "--threads", "4",
            "--download-nonces",
        ]
    )
    assert config.nodes == ["a:1", "b:2"]
    assert config.transactions == 313
    assert config.seed == "//Alice"
    assert config.skip_initialization and config.generate_txs and config.download_nonces
    assert config.tx_store_path == "/tmp/tx_store"
    assert config.threads == 4


def test_phrase_conflicts_with_seed():
    with pytest.raises(SystemExit) as raised:
        parse_config(["--phrase", "words", "--seed", "//Alice"])
    assert raised.value.code != 0


def test_negative_count_is_rejected():
    with pytest.raises(SystemExit) as raised:
        parse_config(["--transactions", "-1"])
    assert raised.value.code != 0


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as raised:
        parse_config(["--version"])
    assert raised.value.code == 0
    assert "1.0" in capsys.readouterr().out


def test_rate_limiting_absent_by_default():
    assert parse_config([]).rate_limiting() is None


def test_rate_limiting_with_both_options():
    config = parse_config(["--transactions-in-interval", "100", "--interval-secs", "2"])
    assert config.rate_limiting() == (100, 2)


@pytest.mark.parametrize(
    "argv", [["--transactions-in-interval", "100"], ["--interval-secs", "2"]]
)
def test_rate_limiting_needs_both_options(argv):
    with pytest.raises(ValueError, match="--interval-secs"):
        parse_config(argv).rate_limiting()


def test_read_phrase_from_file_strips_trailing_whitespace(tmp_path):
    phrase_file = tmp_path / "phrase"
    phrase_file.write_text("  bottom drive obey\n\n")
    assert read_phrase(str(phrase_file)) == "  bottom drive obey"


def test_read_phrase_returns_text_when_not_a_file(tmp_path):
    missing = str(tmp_path / "missing")
    assert read_phrase(missing) == missing
    assert read_phrase("bottom drive obey ") == "bottom drive obey "