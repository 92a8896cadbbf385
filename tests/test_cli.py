"""
CLI tests: argument handling, output format and deletion safety.
End-to-end tests run the real Pillow + ImageHash pipeline on generated PNGs.
"""
import logging
import sys
from unittest import mock
import pytest

from lookalike import cli
from lookalike.cli import CLIApplication
from lookalike.commands import SimilarityCommand
from lookalike.core import FingerprintedImage, ImageGroup, SpaceReclaimer
from lookalike.services.file_service import FileService


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


class TestArgumentParsing:

    def test_positional_arguments(self):
        args = CLIApplication.parse_args(["/photos", "90"])
        assert args.directory == "/photos"
        assert args.similarity == "90"
        assert args.delete is False
        assert args.trash is False
        assert args.skip_unreadable is False
        assert args.verbose is False

    def test_delete_flag_variants(self):
        assert CLIApplication.parse_args(["-d", "/photos", "90"]).delete is True
        assert CLIApplication.parse_args(["--delete", "/photos", "90"]).delete is True

    def test_reads_sys_argv_by_default(self):
        with mock.patch.object(sys, 'argv', ['lookalike', '-d', '/photos', '75']):
            args = CLIApplication.parse_args()
        assert args.delete is True
        assert args.similarity == "75"

    def test_missing_arguments_exit(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication.parse_args(["/photos"])
        assert exc_info.value.code != 0

    @pytest.mark.parametrize("percentage", ["abc", "101", "-5", "nan"])
    def test_invalid_percentage_exits_before_scanning(self, tmp_path, capsys, percentage):
        with mock.patch.object(SimilarityCommand, 'execute') as mock_execute:
            with pytest.raises(SystemExit) as exc_info:
                CLIApplication().run([str(tmp_path), percentage])

        assert exc_info.value.code == 1
        assert "Invalid similarity percentage" in capsys.readouterr().err
        mock_execute.assert_not_called()

    def test_trash_requires_delete(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication().run(["--trash", str(tmp_path), "90"])
        assert exc_info.value.code == 1
        assert "--trash can only be used with -d" in capsys.readouterr().err


class TestReportOutput:

    def test_end_to_end_report_only(self, photo_dir, capsys):
        """Images a-c form one group; d (noise) is never mentioned; nothing is deleted."""
        CLIApplication().run([str(photo_dir["root"]), "90"])

        out = capsys.readouterr().out
        expected = "Similar images:\n" + "".join(f"{photo_dir[n]}\n" for n in ("a", "b", "c")) + "\n"
        assert out == expected
        assert str(photo_dir["d"]) not in out
        assert "Total space saved" not in out
        assert all(photo_dir[n].exists() for n in ("a", "b", "c", "d"))

    def test_output_results_format(self, capsys):
        groups = [
            ImageGroup([FingerprintedImage("/p/a.png", 0), FingerprintedImage("/p/b.png", 0)]),
            ImageGroup([FingerprintedImage("/p/c.png", 0), FingerprintedImage("/p/d.png", 0)]),
        ]
        CLIApplication.output_results(groups)
        assert capsys.readouterr().out == (
            "Similar images:\n/p/a.png\n/p/b.png\n\n"
            "Similar images:\n/p/c.png\n/p/d.png\n\n"
        )

    def test_no_groups_prints_nothing(self, tmp_path, capsys):
        CLIApplication().run([str(tmp_path), "90"])
        assert capsys.readouterr().out == ""

    def test_missing_directory_exits_gracefully(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication().run([str(tmp_path / "missing"), "90"])
        assert exc_info.value.code == 1
        assert "Error loading images" in capsys.readouterr().err

    def test_undecodable_image_aborts_run(self, photo_dir, capsys):
        (photo_dir["root"] / "broken.jpg").write_bytes(b"not a jpeg")
        with pytest.raises(SystemExit):
            CLIApplication().run(["-d", str(photo_dir["root"]), "90"])
        assert "Error loading images" in capsys.readouterr().err
        assert all(photo_dir[n].exists() for n in ("a", "b", "c", "d")), "Nothing may be deleted"

    def test_skip_unreadable_continues(self, photo_dir, capsys):
        (photo_dir["root"] / "broken.jpg").write_bytes(b"not a jpeg")
        CLIApplication().run(["--skip-unreadable", str(photo_dir["root"]), "90"])
        assert capsys.readouterr().out.startswith("Similar images:\n")


class TestDeletion:

    def test_end_to_end_delete(self, photo_dir, capsys):
        """
        CRITICAL: with -d exactly two files go, the anchor (a.png) and the
        unrelated d.png stay, and the reported total equals the removed sizes.
        """
        expected_bytes = photo_dir["b"].stat().st_size + photo_dir["c"].stat().st_size

        with mock.patch.object(sys, 'argv', ['lookalike', '-d', str(photo_dir["root"]), '90']):
            CLIApplication().run()

        out = capsys.readouterr().out
        assert out.splitlines()[-1] == f"Total space saved: {expected_bytes} bytes"
        assert photo_dir["a"].exists(), "Anchor MUST be preserved"
        assert photo_dir["d"].exists()
        assert not photo_dir["b"].exists()
        assert not photo_dir["c"].exists()

    def test_delete_with_no_groups_reports_zero(self, tmp_path, capsys):
        CLIApplication().run(["-d", str(tmp_path), "90"])
        assert capsys.readouterr().out == "Total space saved: 0 bytes\n"

    def test_trash_mode_uses_send2trash(self, photo_dir, capsys):
        with mock.patch.object(FileService, 'move_to_trash') as mock_trash, \
                mock.patch.object(FileService, 'remove_file') as mock_remove:
            CLIApplication().run(["-d", "--trash", str(photo_dir["root"]), "90"])

        trashed = [call.args[0] for call in mock_trash.call_args_list]
        assert trashed == [str(photo_dir["b"]), str(photo_dir["c"])]
        mock_remove.assert_not_called()

    def test_failing_group_is_reported_and_not_counted(self, photo_dir, capsys):
        real_remove = FileService.remove_file

        def flaky_remove(path):
            if path == str(photo_dir["c"]):
                raise PermissionError("Permission denied")
            real_remove(path)

        with mock.patch.object(FileService, 'remove_file', side_effect=flaky_remove):
            CLIApplication().run(["-d", str(photo_dir["root"]), "90"])

        captured = capsys.readouterr()
        assert "Error deleting images" in captured.err
        assert captured.out.splitlines()[-1] == "Total space saved: 0 bytes"
        assert not photo_dir["b"].exists(), "Already deleted file is not restored"
        assert photo_dir["c"].exists()

    def test_execute_reclaim_continues_after_failed_group(self, int_algorithm, make_files, capsys):
        bad_anchor, bad_dup, good_anchor, good_dup = make_files([
            ("bad_anchor.png", 10, 0),
            ("bad_dup.png", 100, 0),
            ("good_anchor.png", 10, 50),
            ("good_dup.png", 64, 50),
        ])
        groups = [ImageGroup([bad_anchor, bad_dup]), ImageGroup([good_anchor, good_dup])]

        with mock.patch.object(FileService, 'get_file_size',
                               side_effect=[OSError("stat failed"), 64]):
            freed = CLIApplication().execute_reclaim(groups, SpaceReclaimer(int_algorithm))

        assert freed == 64
        captured = capsys.readouterr()
        assert captured.out == "Total space saved: 64 bytes\n"
        assert "stat failed" in captured.err

    def test_verbose_shows_keep_preview(self, photo_dir, capsys, restore_root_level):
        CLIApplication().run(["-v", "-d", str(photo_dir["root"]), "90"])

        out = capsys.readouterr().out
        assert f"[KEEP] {photo_dir['a']}" in out
        assert f"[DEL]  {photo_dir['b']} (similarity 100.00%)" in out
        assert out.splitlines()[-1].startswith("Total space saved: ")


class TestMain:

    def test_unexpected_error_exits_with_code_1(self, capsys, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        with mock.patch.object(CLIApplication, 'run', side_effect=Exception("boom")):
            with pytest.raises(SystemExit) as exc_info:
                cli.main()
        assert exc_info.value.code == 1
        assert "Unexpected error: boom" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_with_130(self, capsys):
        with mock.patch.object(CLIApplication, 'run', side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                cli.main()
        assert exc_info.value.code == 130
