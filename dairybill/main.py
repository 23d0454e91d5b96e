from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from dairybill.core.errors import BillGenerationError
from dairybill.core.settings import load_settings, save_settings
from dairybill.data.loader import billing_from_dict, customer_from_dict
from dairybill.pdf.bill_pdf import build_bill_pdf
from dairybill.printing.print_windows import open_file, print_file

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dairybill", description="Render a dairy bill (PDF or PNG) from a JSON description.")
    p.add_argument("bill", type=Path, help="JSON file with 'customer' and 'billing' objects")
    p.add_argument("-o", "--output", type=Path, help="output directory or file (default: last used folder, else cwd)")
    p.add_argument("--png", action="store_true", help="write a PNG image instead of a PDF")
    p.add_argument("--settings", type=Path, help="settings.json to use")
    p.add_argument("--invoice-no", help="use this invoice number instead of a random one")
    p.add_argument("--open", action="store_true", help="open the result in the default viewer")
    p.add_argument("--print", dest="do_print", action="store_true", help="send the result to the printer (Windows)")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings(args.settings)

    try:
        raw = json.loads(args.bill.read_text(encoding="utf-8"))
        customer = customer_from_dict(raw.get("customer") or {})
        billing = billing_from_dict(raw["billing"])
    except (OSError, json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError) as exc:
        logger.error("Cannot read bill %s: %s", args.bill, exc)
        return 2

    out = args.output or Path(settings.last_output_dir or ".")
    try:
        written = build_bill_pdf(out, customer, billing, settings, as_image=args.png, invoice_no=args.invoice_no)
    except BillGenerationError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Cannot write bill to %s: %s", out, exc)
        return 1

    if args.output is not None:
        settings.last_output_dir = str(written.parent.resolve())
        try:
            save_settings(settings, args.settings)
        except OSError as exc:
            logger.warning("Could not remember output folder: %s", exc)

    print(written)
    if args.do_print and not print_file(written):
        logger.warning("Couldn't auto-print. Open %s and print from your viewer.", written)
    elif args.open:
        open_file(written)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
