import argparse
import json

from cardplan.agents.orchestrator import RecommendationOrchestrator
from cardplan.api.app import run as run_api
from cardplan.config import configure_logging, settings
from cardplan.repository.card_store import CardStore
from cardplan.schemas.requests import RecommendRequest
from cardplan.utils.dates import parse_iso_date


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CardPlan unified entrypoint")
    sub = parser.add_subparsers(dest="mode")

    sub.add_parser("api", help="Run the HTTP API (default)")

    rec = sub.add_parser("recommend", help="Rank cards for one purchase and print JSON")
    rec.add_argument("--amount", type=float, required=True)
    rec.add_argument("--category", required=True)
    rec.add_argument("--installments", type=int, default=1)
    rec.add_argument("--date", type=parse_iso_date, default=None, help="yyyy-MM-dd, default today")
    rec.add_argument("--channel", choices=["online", "offline"], default="offline")
    rec.add_argument("--merchant")
    rec.add_argument("--pos-fee", type=float, default=None, help="POS fee as a fraction, e.g. 0.02")
    rec.add_argument("--no-campaigns", action="store_true")
    return parser


def run_recommend(args: argparse.Namespace) -> None:
    configure_logging()
    orchestrator = RecommendationOrchestrator(
        CardStore(settings.cards_file, settings.campaigns_file),
        weights=settings.weights,
    )
    result = orchestrator.recommend(
        RecommendRequest(
            amount=args.amount,
            category=args.category,
            installment_count=args.installments,
            date=args.date,
            channel=args.channel,
            merchant=args.merchant,
            pos_fee_percent=args.pos_fee,
            campaigns_active=not args.no_campaigns,
        )
    )
    rows = [
        {
            "card": item.card.name,
            "total_score": item.total_score,
            "net_value_tl": item.breakdown.net_value_tl,
            "installments": item.adjusted_installments,
            "explanation": item.explanation,
        }
        for item in result.ranked_cards
    ]
    print(json.dumps(rows, ensure_ascii=False, indent=2))


def main() -> None:
    args = build_parser().parse_args()

    if args.mode == "recommend":
        run_recommend(args)
        return

    run_api()


if __name__ == "__main__":
    main()
