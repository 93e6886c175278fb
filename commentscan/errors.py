"""commentscan の例外定義。

未終端コメント/文字列はここには含めない(スキャナの回復可能イベントとして
Diagnostics 経由で報告する)。
"""
from __future__ import annotations


class CommentScanError(Exception):
    """commentscan が送出する例外の基底クラス。"""


class UsageError(CommentScanError):
    """引数が不正。スキャン開始前に送出される。"""


class FileOpenError(CommentScanError):
    """指定ファイルを開けなかった。実行全体を中断する致命的エラー。"""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"cannot open {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class SyntaxProfileError(CommentScanError, ValueError):
    """区切り文字プロファイルが不正。"""


__all__ = ["CommentScanError", "UsageError", "FileOpenError", "SyntaxProfileError"]
