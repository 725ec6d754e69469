from shuttle_routing.__main__ import main, parse_args


def test_parse_optimize_args():
    args = parse_args(["optimize", "request.json", "--include-pickups", "--output", "out.json"])

    assert args.command == "optimize"
    assert args.file == "request.json"
    assert args.include_pickups is True
    assert args.output == "out.json"
    assert args.vehicles == 1


def test_parse_serve_args():
    args = parse_args(["serve", "--port", "9000"])
    assert (args.command, args.host, args.port) == ("serve", "0.0.0.0", 9000)


def test_missing_request_file_exits_with_error(tmp_path):
    assert main(["optimize", str(tmp_path / "missing.json")]) == 1


def test_missing_credentials_exit_with_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in ("GOOGLE_PROJECT_ID", "GOOGLE_CLIENT_EMAIL", "GOOGLE_PRIVATE_KEY"):
        monkeypatch.delenv(key, raising=False)
    request = tmp_path / "request.json"
    request.write_text('{"bookings": [], "vehicles": []}')

    assert main(["optimize", str(request)]) == 1
