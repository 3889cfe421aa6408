import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple, Union

from icucheck.checker import PluralChecker
from icucheck.config import LintSettings
from icucheck.resources import ResourceString
from icucheck.results import Result

logger = logging.getLogger(__name__)

PathPart = Union[str, int]


def load_json(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"{path} not found")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise TypeError(f"{path} must contain a JSON object at the root")
    return data


def iter_messages(
    doc: Any, key: str = "", path: Tuple[PathPart, ...] = ()
) -> Iterator[Tuple[str, Tuple[PathPart, ...], str]]:
    """Yield `(key, path, text)` for every string in a nested locale document.

    Keys are dotted with list indices in brackets, e.g. `menu.items[2]`.
    """
    if isinstance(doc, dict):
        for name, value in doc.items():
            yield from iter_messages(value, f"{key}.{name}" if key else str(name), path + (name,))
    elif isinstance(doc, list):
        for index, value in enumerate(doc):
            yield from iter_messages(value, f"{key}[{index}]", path + (index,))
    elif isinstance(doc, str):
        yield key, path, doc


def lookup_message(doc: Any, path: Tuple[PathPart, ...]) -> Optional[str]:
    """Return the string at `path`, or None when it is absent or not a string."""
    for part in path:
        if isinstance(part, int) and isinstance(doc, list) and 0 <= part < len(doc):
            doc = doc[part]
        elif isinstance(part, str) and isinstance(doc, dict) and part in doc:
            doc = doc[part]
        else:
            return None
    return doc if isinstance(doc, str) else None


def build_resources(
    src: dict,
    dst: Optional[dict],
    source_locale: str,
    target_locale: Optional[str],
    comments: Optional[dict] = None,
    path_name: str = "",
) -> List[ResourceString]:
    """Pair every source string with the string at the same path in `dst`."""
    resources = []
    for key, path, source in iter_messages(src):
        resources.append(
            ResourceString(
                key=key,
                source=source,
                target=lookup_message(dst, path),
                source_locale=source_locale,
                target_locale=target_locale,
                comment=lookup_message(comments, path),
                path=path_name,
            )
        )
    return resources


def format_result(result: Result) -> str:
    label = "error" if result.is_error else "warn"
    return f"[{label}] {result.id}: {result.description} ({result.rule})\n    {result.highlight}"


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    settings = LintSettings.from_env()

    parser = argparse.ArgumentParser(
        description="Check ICU plural and select messages in locale JSON files"
    )
    parser.add_argument("--src", required=True, help="Path to the source locale JSON")
    parser.add_argument("--dst", help="Path to the translated locale JSON")
    parser.add_argument(
        "--source-locale", default=settings.source_locale, help="Locale of the source file"
    )
    parser.add_argument(
        "--target-locale", default=settings.target_locale, help="Locale of the translated file"
    )
    parser.add_argument("--comments", help="JSON file with translator comments keyed like --src")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    args = parser.parse_args(argv)

    if args.dst and not args.target_locale:
        parser.error("--target-locale is required with --dst")

    src_path = Path(args.src)
    src = load_json(src_path)
    dst = load_json(Path(args.dst)) if args.dst else None
    comments = load_json(Path(args.comments)) if args.comments else None

    resources = build_resources(
        src,
        dst,
        args.source_locale,
        args.target_locale,
        comments,
        path_name=args.dst or args.src,
    )
    checker = PluralChecker(settings)
    results = checker.check_resources(resources, show_progress=not args.no_progress)

    for result in results:
        print(format_result(result))

    if any(result.is_error for result in results):
        print("[fail] ICU check failed")
        return 2
    print("[ok] ICU check passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
