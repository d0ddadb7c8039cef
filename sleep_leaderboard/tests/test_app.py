import io
import json
import os
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from typing import List
from unittest.mock import patch

from sleep_leaderboard import cli
from sleep_leaderboard.app import LeaderboardJob, build_entries
from sleep_leaderboard.config import LeaderboardConfig
from sleep_leaderboard.github_client import SourceFetchError
from sleep_leaderboard.models import Issue
from sleep_leaderboard.publisher import Publisher
from sleep_leaderboard.store import LocalBlobStore

# 2024-03-02 05:00 in UTC+8, so the report date is 2024-03-01.
NOW = datetime(2024, 3, 1, 21, 0, tzinfo=timezone.utc)

HEADER = '| Date | Sleep (UTC+8) | Wake (UTC+8) | Duration | Source |'


def _body(*rows: str) -> str:
    table = '\n'.join([HEADER, '|---|---|---|---|---|', *rows])
    return f'<!-- SLEEP_LOG_TABLE_START -->\n{table}\n<!-- SLEEP_LOG_TABLE_END -->\n'


def _issues() -> List[Issue]:
    return [
        Issue(1, 'https://github.com/octo/sleep-club/issues/1', 'alice',
              _body('| 2024-03-01 | 2024-03-01 23:40 | 2024-03-02 07:10 | 7h30m | manual |')),
        Issue(2, 'https://github.com/octo/sleep-club/issues/2', 'bob',
              _body('| 2024-03-01 | 2024-03-02 01:15 |  |  | manual |')),
        Issue(3, 'https://github.com/octo/sleep-club/issues/3', None,
              _body('| 2024-03-01 | 2024-03-02 00:30 | 2024-03-02 06:15 | 5h45m | watch |')),
        Issue(4, 'https://github.com/octo/sleep-club/issues/4', 'carol', 'no table here'),
    ]


class _FakeSource:
    def __init__(self, issues: List[Issue] = None, error: Exception = None) -> None:
        self.issues = issues or []
        self.error = error
        self.labels: List[str] = []

    def list_open_issues(self, label: str) -> List[Issue]:
        self.labels.append(label)
        if self.error is not None:
            raise self.error
        return list(self.issues)


def _config(root: str, **overrides) -> LeaderboardConfig:
    return LeaderboardConfig(repo='octo/sleep-club', token='t', output_root=root, **overrides)


def _publisher(config: LeaderboardConfig) -> Publisher:
    store = LocalBlobStore(config.output_root)
    return Publisher(store, config.latest_path, config.history_path, config.readme_path)


class TestBuildEntries(unittest.TestCase):
    def test_one_entry_per_complete_issue(self) -> None:
        entries = build_entries(_issues(), '2024-03-01')
        self.assertEqual([e.issue_number for e in entries], [1, 3])
        self.assertEqual(entries[0].user_url, 'https://github.com/alice')
        self.assertEqual(entries[1].user, '')
        self.assertEqual(entries[1].user_url, '')
        self.assertEqual(entries[1].minutes, 345)

    def test_logs_each_extracted_record(self) -> None:
        with self.assertLogs('sleep_leaderboard.app', level='DEBUG') as logs:
            build_entries(_issues()[:1], '2024-03-01')
        self.assertIn(
            'Issue #1: 2024-03-01 sleep=2024-03-01 23:40 wake=2024-03-02 07:10 7h30m',
            '\n'.join(logs.output),
        )


class TestLeaderboardJob(unittest.TestCase):
    def test_run_publishes_all_outputs(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / 'README.md').write_text('# Sleep Club\n\nIntro.\n', encoding='utf-8')
            config = _config(td, top_n=1, dashboard_url='https://example.org/sleep')
            source = _FakeSource(_issues())

            result = LeaderboardJob(config, source, _publisher(config), now=lambda: NOW).run()

            self.assertEqual(source.labels, ['sleep-log'])
            snapshot = json.loads((root / 'docs' / 'leaderboard-latest.json').read_text(encoding='utf-8'))
            self.assertEqual(snapshot['date'], '2024-03-01')
            self.assertEqual(snapshot['cutoff'], '04:00 (UTC+8)')
            self.assertEqual(snapshot['generated_at'], '2024-03-02 05:00:00 (UTC+8)')
            self.assertEqual(snapshot['counts'], {'open_sleep_log_issues': 4, 'complete_records': 2})
            self.assertEqual([e['issue_number'] for e in snapshot['latest_sleep']], [3])
            self.assertEqual([e['issue_number'] for e in snapshot['longest_sleep']], [1])

            history = (root / 'docs' / 'leaderboard-history.ndjson').read_text(encoding='utf-8')
            self.assertEqual(len(history.splitlines()), 1)

            readme = (root / 'README.md').read_text(encoding='utf-8')
            self.assertTrue(readme.startswith('# Sleep Club\n\n<!-- LEADERBOARD_START -->\n'))
            self.assertIn(result.block, readme)
            self.assertTrue(readme.endswith('<!-- LEADERBOARD_END -->\nIntro.\n'))
            self.assertIn('完整榜单见：https://example.org/sleep', result.block)

    def test_rerun_appends_history(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = _config(td)
            for _ in range(2):
                LeaderboardJob(config, _FakeSource(_issues()), _publisher(config), now=lambda: NOW).run()
            history = (Path(td) / 'docs' / 'leaderboard-history.ndjson').read_text(encoding='utf-8')
            lines = history.splitlines()
            self.assertEqual(len(lines), 2)
            self.assertEqual(lines[0], lines[1])

    def test_no_matching_issues(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = _config(td)
            result = LeaderboardJob(config, _FakeSource([]), _publisher(config), now=lambda: NOW).run()
            self.assertEqual(result.snapshot.counts.complete_records, 0)
            self.assertEqual(result.snapshot.latest_sleep, ())
            self.assertEqual(result.block.count('暂无'), 4)

    def test_source_failure_writes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = _config(td)
            source = _FakeSource(error=SourceFetchError('GET', '/repos/octo/sleep-club/issues', 502, 'bad gateway'))

            with self.assertRaises(SourceFetchError):
                LeaderboardJob(config, source, _publisher(config), now=lambda: NOW).run()

            self.assertEqual(os.listdir(td), [])

    def test_dry_run_publishes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = _config(td)
            result = LeaderboardJob(config, _FakeSource(_issues()), now=lambda: NOW).run()
            self.assertEqual(result.snapshot.counts.complete_records, 2)
            self.assertEqual(os.listdir(td), [])


class TestCli(unittest.TestCase):
    def test_run_fails_fast_without_configuration(self) -> None:
        with patch.dict(os.environ, {'REPO': '', 'GITHUB_TOKEN': ''}, clear=False):
            with patch('sleep_leaderboard.cli.run_leaderboard') as run:
                with patch('sys.stderr', new_callable=io.StringIO) as err:
                    code = cli.main(['run'])
        self.assertEqual(code, 1)
        self.assertIn('Configuration error', err.getvalue())
        run.assert_not_called()

    def test_run_returns_error_code_on_fetch_failure(self) -> None:
        env = {'REPO': 'octo/sleep-club', 'GITHUB_TOKEN': 't'}
        error = SourceFetchError('GET', '/repos/octo/sleep-club/issues', 500, 'oops')
        with patch.dict(os.environ, env, clear=False):
            with patch('sleep_leaderboard.cli.run_leaderboard', side_effect=error):
                with self.assertLogs('sleep_leaderboard.cli', level='ERROR'):
                    code = cli.main(['run'])
        self.assertEqual(code, 1)

    def test_run_delegates_to_run_leaderboard(self) -> None:
        env = {'REPO': 'octo/sleep-club', 'GITHUB_TOKEN': 't'}
        with patch.dict(os.environ, env, clear=False):
            with patch('sleep_leaderboard.cli.run_leaderboard') as run:
                code = cli.main(['run'])
        self.assertEqual(code, 0)
        run.assert_called_once()
        self.assertEqual(run.call_args.kwargs, {'dry_run': False})
        self.assertEqual(run.call_args.args[0].repo, 'octo/sleep-club')

    def test_extract_prints_record(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / 'body.md'
            path.write_text(_body('| 2024-03-01 | 2024-03-01 23:40 | 2024-03-02 07:10 | 7h30m | manual |'),
                            encoding='utf-8')
            with patch('sys.stdout', new_callable=io.StringIO) as out:
                code = cli.main(['extract', str(path), '--date', '2024-03-01'])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out.getvalue())['duration_minutes'], 450)

    def test_extract_reports_missing_record(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / 'body.md'
            path.write_text('nothing', encoding='utf-8')
            with patch('sys.stderr', new_callable=io.StringIO):
                code = cli.main(['extract', str(path), '--date', '2024-03-01'])
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
