#!/usr/bin/env python3
"""
タスク管理CLI - TaskStoreのコマンドラインインターフェース

Usage:
    python -m src.todo.cli list [--archived] [--search TEXT] [--category NAME] [--format json|text]
    python -m src.todo.cli add --title "タイトル" [--note "メモ"] [--category NAME] [--due-date YYYY-MM-DD]
    python -m src.todo.cli update --id ID [--title ...] [--note ...] [--category ...] [--due-date ...] [--clear-due-date]
    python -m src.todo.cli complete --id ID
    python -m src.todo.cli archive --id ID
    python -m src.todo.cli restore --id ID
    python -m src.todo.cli delete --id ID
    python -m src.todo.cli get --id ID
    python -m src.todo.cli stats

IDはUUIDの先頭部分（一意に定まる長さ）でも指定できる。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from src.record_store import RecordStoreError, StoreConfig, create_storage
from src.record_store.logger import setup_logger

from .models import Task
from .store import TaskStore

logger = logging.getLogger(__name__)


def format_task_text(task: Task) -> str:
    """タスクをテキスト形式で整形"""
    due = task.due_date.isoformat() if task.due_date else "未設定"
    category = task.category or "なし"
    note = task.note.strip() or "メモなし"
    return f"[{str(task.id)[:8]}] {task.status.value} | 期限: {due} | {category} | {task.title} | {note}"


def format_task_json(task: Task) -> Dict[str, Any]:
    """タスクを辞書形式に変換"""
    payload = task.model_dump(mode="json")
    payload["status"] = task.status.value
    return payload


def resolve_task(store: TaskStore, raw_id: str) -> Optional[Task]:
    """完全なUUIDまたは一意な先頭部分からタスクを引く"""
    prefix = raw_id.strip().lower()
    if not prefix:
        return None
    matches = [task for task in store.records if str(task.id).startswith(prefix)]
    return matches[0] if len(matches) == 1 else None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return date.fromisoformat(value)


def _emit(task: Task, output_format: str, label: str = "") -> None:
    if output_format == "json":
        print(json.dumps(format_task_json(task), ensure_ascii=False))
    else:
        print(f"{label}{format_task_text(task)}")


def _not_found(raw_id: str) -> int:
    print(f"Error: ID {raw_id} のタスクが見つかりません。", file=sys.stderr)
    return 1


def cmd_list(
    store: TaskStore,
    archived: bool,
    search: str,
    category: Optional[str],
    output_format: str,
) -> int:
    """タスクリストを表示"""
    if archived:
        items = store.archived()
    else:
        items = store.search(search, category)
    if output_format == "json":
        print(json.dumps([format_task_json(item) for item in items], ensure_ascii=False))
    elif not items:
        print("タスクは登録されていません。")
    else:
        for item in items:
            print(format_task_text(item))
    return 0


def cmd_add(
    store: TaskStore,
    title: str,
    note: str,
    category: Optional[str],
    due_date: Optional[str],
    output_format: str,
) -> int:
    """新しいタスクを追加"""
    if not title.strip():
        print("Error: タイトルは必須です。", file=sys.stderr)
        return 1

    try:
        parsed_due = _parse_date(due_date)
    except ValueError:
        print(f"Error: 不正な期限日: {due_date}。YYYY-MM-DD形式で指定してください。", file=sys.stderr)
        return 1

    created = store.create(
        title=title.strip(),
        note=note.strip(),
        category=category.strip() if category else None,
        due_date=parsed_due,
    )
    _emit(created, output_format, "追加しました: ")
    return 0


def cmd_update(
    store: TaskStore,
    raw_id: str,
    title: Optional[str],
    note: Optional[str],
    category: Optional[str],
    due_date: Optional[str],
    clear_due_date: bool,
    output_format: str,
) -> int:
    """既存のタスクを更新"""
    task = resolve_task(store, raw_id)
    if task is None:
        return _not_found(raw_id)

    changes: Dict[str, Any] = {}
    if title is not None:
        if not title.strip():
            print("Error: タイトルは必須です。", file=sys.stderr)
            return 1
        changes["title"] = title.strip()
    if note is not None:
        changes["note"] = note.strip()
    if category is not None:
        changes["category"] = category.strip() or None
    if clear_due_date:
        changes["due_date"] = None
    elif due_date is not None:
        try:
            changes["due_date"] = _parse_date(due_date)
        except ValueError:
            print(f"Error: 不正な期限日: {due_date}。YYYY-MM-DD形式で指定してください。", file=sys.stderr)
            return 1

    updated = store.set_fields(task.id, **changes) if changes else task
    _emit(updated, output_format, "更新しました: ")
    return 0


def cmd_transition(store: TaskStore, raw_id: str, action: str, output_format: str) -> int:
    """complete / archive / restore の共通処理"""
    task = resolve_task(store, raw_id)
    if task is None:
        return _not_found(raw_id)

    if action == "complete":
        updated = store.set_completed(task.id, True)
        label = "完了しました: "
    elif action == "archive":
        updated = store.archive(task.id)
        label = "アーカイブしました: "
    else:
        updated = store.restore(task.id)
        label = "復元しました: "
    _emit(updated, output_format, label)
    return 0


def cmd_delete(store: TaskStore, raw_id: str, output_format: str) -> int:
    """タスクを削除"""
    task = resolve_task(store, raw_id)
    if task is None:
        return _not_found(raw_id)

    store.delete(task.id)
    if output_format == "json":
        print(json.dumps({"deleted": True, "id": str(task.id)}, ensure_ascii=False))
    else:
        print(f"削除しました: ID {task.id}")
    return 0


def cmd_get(store: TaskStore, raw_id: str, output_format: str) -> int:
    """特定のタスクを取得"""
    task = resolve_task(store, raw_id)
    if task is None:
        return _not_found(raw_id)
    _emit(task, output_format)
    return 0


def cmd_stats(store: TaskStore, output_format: str) -> int:
    """件数・完了率・カテゴリ別件数を表示"""
    stats = {
        "total": len(store),
        "active": len(store.active()),
        "archived": len(store.archived()),
        "completion_rate": round(store.completion_rate(), 4),
        "categories": {str(k) if k is not None else "": v for k, v in store.category_counts().items()},
    }
    if output_format == "json":
        print(json.dumps(stats, ensure_ascii=False))
    else:
        print(f"全件: {stats['total']} / 未アーカイブ: {stats['active']} / アーカイブ: {stats['archived']}")
        print(f"完了率: {stats['completion_rate'] * 100:.1f}%")
        for name, count in stats["categories"].items():
            print(f"  {name or 'なし'}: {count}")
    return 0


def _add_format_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="出力フォーマット（デフォルト: text）",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="タスク管理CLI - ローカルレコードストア上のタスクリスト",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="SQLiteデータベースファイルのパス（設定のdb_pathを上書き。backend: memory では未使用）",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="設定ファイルのパス（デフォルト: config/record_store.yaml）",
    )

    subparsers = parser.add_subparsers(dest="command", help="実行するコマンド", required=True)

    parser_list = subparsers.add_parser("list", help="タスクリストを表示")
    parser_list.add_argument("--archived", action="store_true", help="アーカイブ済みのみ表示")
    parser_list.add_argument("--search", default="", help="タイトル/メモの部分一致")
    parser_list.add_argument("--category", help="カテゴリで絞り込み")
    _add_format_option(parser_list)

    parser_add = subparsers.add_parser("add", help="新しいタスクを追加")
    parser_add.add_argument("--title", required=True, help="タスクのタイトル")
    parser_add.add_argument("--note", default="", help="メモ")
    parser_add.add_argument("--category", help="カテゴリ")
    parser_add.add_argument("--due-date", help="期限日（YYYY-MM-DD形式）")
    _add_format_option(parser_add)

    parser_update = subparsers.add_parser("update", help="既存のタスクを更新")
    parser_update.add_argument("--id", required=True, help="更新するタスクのID")
    parser_update.add_argument("--title", help="新しいタイトル")
    parser_update.add_argument("--note", help="新しいメモ")
    parser_update.add_argument("--category", help="新しいカテゴリ（空文字でクリア）")
    parser_update.add_argument("--due-date", help="新しい期限日（YYYY-MM-DD形式）")
    parser_update.add_argument("--clear-due-date", action="store_true", help="期限日をクリア")
    _add_format_option(parser_update)

    for name, help_text in (
        ("complete", "タスクを完了状態にする"),
        ("archive", "タスクをアーカイブする"),
        ("restore", "アーカイブからタスクを復元する"),
        ("delete", "タスクを削除"),
        ("get", "特定のタスクを取得"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--id", required=True, help="対象タスクのID")
        _add_format_option(sub)

    parser_stats = subparsers.add_parser("stats", help="統計を表示")
    _add_format_option(parser_stats)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLIエントリポイント"""
    args = build_parser().parse_args(argv)

    config = StoreConfig.from_yaml(Path(args.config)) if args.config else StoreConfig.from_env()
    if args.db_path:
        config = replace(config, db_path=args.db_path)
    setup_logger(config)

    store = TaskStore(create_storage(config), raise_on_write_error=config.raise_on_write_error)

    try:
        if args.command == "list":
            return cmd_list(store, args.archived, args.search, args.category, args.format)
        elif args.command == "add":
            return cmd_add(store, args.title, args.note, args.category, args.due_date, args.format)
        elif args.command == "update":
            return cmd_update(
                store,
                args.id,
                args.title,
                args.note,
                args.category,
                args.due_date,
                args.clear_due_date,
                args.format,
            )
        elif args.command in ("complete", "archive", "restore"):
            return cmd_transition(store, args.id, args.command, args.format)
        elif args.command == "delete":
            return cmd_delete(store, args.id, args.format)
        elif args.command == "get":
            return cmd_get(store, args.id, args.format)
        elif args.command == "stats":
            return cmd_stats(store, args.format)
    except RecordStoreError as exc:
        logger.error("Command %s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Error: 不明なコマンド: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
