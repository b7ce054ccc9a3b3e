"""
CLI Entry Point: Estimate CTC from a GitHub profile

Usage:
    python scripts/estimate_ctc.py --url https://github.com/octocat --experience "Mid (3-5 yr)" --role "Backend Engineer"
    python scripts/estimate_ctc.py --url https://github.com/octocat --experience "Junior (1-3 yr)" --role "Frontend Engineer" --save
    python scripts/estimate_ctc.py --history octocat --limit 5
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.common.config import Config
from src.common.error_handling import CTCEstimatorError
from src.common.logger import set_global_debug_mode, setup_logging
from src.common.repositories import AnalysisRepositoryProvider
from src.services.analysis_pipeline import AnalysisPipeline
from src.services.analysis_store_service import get_analysis_history, save_analysis
from src.services.ctc_estimator import CTCEstimator
from src.services.github_profile_service import GitHubProfileService


def print_outcome(outcome) -> None:
    """Print the estimate card."""
    stats = outcome.profile.stats
    user = outcome.profile.user

    print("\n" + "=" * 70)
    print(f"📊 CTC ESTIMATE: {user.name or user.login} (@{user.login})")
    print("=" * 70)
    print(f"\n💰 Estimated CTC: {outcome.estimate.ctc}")
    print(f"🎯 Confidence:    {outcome.estimate.confidence:.0f}%")
    if outcome.estimate.is_fallback:
        print("⚠️  Fallback estimate (model unavailable or response unusable)")
    print(f"\n{outcome.estimate.message}")

    print("\n📈 GitHub Stats:")
    print(f"   Public repos:    {user.public_repos}")
    print(f"   Followers:       {user.followers}")
    print(f"   Total stars:     {stats.total_stars}")
    print(f"   Total forks:     {stats.total_forks}")
    print(f"   Recent activity: {stats.recent_activity} repos (last 6 months)")
    print(f"   Account age:     {outcome.record['githubData']['accountAge']}")
    top = stats.top_languages()
    if top:
        print(f"   Top languages:   {', '.join(name for name, _ in top)}")
    print()


def print_history(result: dict, username: str) -> int:
    """Print stored analyses for a handle. Returns the exit code."""
    if not result.get("success"):
        print(f"❌ Could not load history for {username}: {result.get('error')}")
        return 1

    records = result.get("data", [])
    if not records:
        print(f"No stored analyses for {username}")
        return 0

    print(f"\n🗂  {len(records)} analyses for {username} (newest first)\n")
    for record in records:
        created = record.get("createdAt")
        when = created.strftime("%Y-%m-%d %H:%M") if created else "unknown date"
        print(
            f"  {when}  {record.get('targetRole')} / {record.get('yearsOfExperience')}"
            f"  ->  {record.get('ctc')} ({record.get('confidence')}%)"
        )
    print()
    return 0


def main():
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Estimate an Indian-market CTC from a public GitHub profile"
    )
    parser.add_argument("--url", help="GitHub profile URL, e.g. https://github.com/octocat")
    parser.add_argument("--experience", help="Years of experience bracket, e.g. 'Mid (3-5 yr)'")
    parser.add_argument("--role", help="Target role, e.g. 'Backend Engineer'")
    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the analysis in MongoDB (requires MONGODB_URI)"
    )
    parser.add_argument("--history", metavar="USERNAME", help="Show stored analyses for a handle")
    parser.add_argument("--limit", type=int, default=10, help="History entries to show (default: 10)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    set_global_debug_mode(args.debug)
    setup_logging(level="WARNING")

    provider = AnalysisRepositoryProvider()
    try:
        if args.history:
            return print_history(get_analysis_history(provider, args.history, limit=args.limit), args.history)

        if not (args.url and args.experience and args.role):
            parser.error("--url, --experience and --role are required unless --history is given")

        if not Config.get_llm_api_key():
            print("⚠️  GEMINI_API_KEY not set: the estimate will be a fallback value\n")

        # Persistence is done synchronously below, so no queue is attached
        pipeline = AnalysisPipeline(GitHubProfileService(), CTCEstimator())
        print(f"🔍 Analyzing {args.url}...")
        try:
            outcome = pipeline.analyze(args.url, args.experience, args.role)
        except CTCEstimatorError as e:
            print(f"❌ {e.user_message}")
            return 1

        print_outcome(outcome)

        if args.save:
            result = save_analysis(provider, outcome.record)
            if result.get("skipped"):
                print("ℹ️  MONGODB_URI not set, analysis not saved")
            elif result.get("success"):
                print(f"✅ Saved analysis {result['id']}")
            else:
                print(f"❌ Save failed: {result.get('error')}")
                return 1
        return 0
    finally:
        provider.close()


if __name__ == "__main__":
    sys.exit(main())
