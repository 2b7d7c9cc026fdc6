from nexus.app import main


def test_main_returns_zero(capsys):
    assert main() == 0
    captured = capsys.readouterr()
    assert "Start CudaModule" in captured.err
    assert "Start Core" in captured.err


def test_main_logs_startup_messages(capsys):
    assert main([]) == 0
    assert "[ID:2][Nexus.Core][INFO] Start sensor" in capsys.readouterr().out