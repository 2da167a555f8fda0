import pandas as pd

from analyze_data import main


def write_csv(rows, path):
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def test_report(tmp_path, capsys, season_rows):
    path = write_csv(season_rows, tmp_path / "matches.csv")
    assert main([str(path), "--top", "3", "--sort-by", "picks"]) == 0

    out = capsys.readouterr().out
    assert "Games: 4" in out
    assert "Complete drafts (pick rate base): 4" in out
    assert "LCK" in out and "Korea" in out
    assert "TOP 3 CHAMPIONS BY PICKS" in out


def test_report_with_league_filter(tmp_path, capsys, season_rows):
    path = write_csv(season_rows, tmp_path / "matches.csv")
    assert main([str(path), "--league", "LPL"]) == 0
    assert "Games: 1" in capsys.readouterr().out


def test_report_fails_on_filter_without_rows(tmp_path, capsys, season_rows):
    path = write_csv(season_rows, tmp_path / "matches.csv")
    assert main([str(path), "--league", "LCS"]) == 1
    assert "❌" in capsys.readouterr().out
