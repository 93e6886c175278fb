"""commentscan
C/Java/JS 風ソースからコメントを抽出するライブラリ。

主な提供機能:
- ブロックコメント(/* */)・行コメント(//)の抽出(文字列/文字リテラル内は無視)
- 行番号と Unicode コードポイント単位の文字位置の算出
- 複数ファイルの逐次走査と、標準入力の範囲走査
- JSON 配列での逐次出力と CLI インターフェース
"""
from .emitter import CommentRecord
from .scanner import Scanner, ScanContext, scan_bytes, scan_files
from .syntax import Syntax

__all__ = [
    "CommentRecord",
    "Scanner",
    "ScanContext",
    "Syntax",
    "scan_bytes",
    "scan_files",
]

__version__ = "0.1.0"
