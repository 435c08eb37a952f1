#!/usr/bin/env python
# pylint: disable=unused-argument

"""
Telegram front end for the business idea odds evaluator.

The user pastes an idea, gets back the success probability, forecasts, key
factors, competitors and recommendations, and can then keep asking the
strategy advisor how to improve the odds.

Commands:
/start - begin, then paste your idea
/competitors - run a fresh web scan for competitors
/save - store the current analysis
/reset - discard the analysis and start over
/cancel - end the conversation
"""

import logging

from telegram import ReplyKeyboardRemove, Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    ConversationHandler,
    MessageHandler,
    filters,
)

from config import load_settings
from datamodels import AnalysisRecord, CompetitorResearch, RevenueForecast
from evaluator.forecasts import load_templates
from evaluator.pipeline import AnalysisSession
from evaluator.storage import JsonFileStore
from prompts import SYSTEM_PROMPT
from structuredllm.llm_wrapper import GeminiReasoner, IntegrationError

logger = logging.getLogger(__name__)


# Define conversation states
IDEA, CHAT = range(2)

BUSY_REPLY = "I'm still working on your last request, hang on..."


def score_label(score: int) -> str:
    if score >= 75:
        return "High Probability"
    if score >= 50:
        return "Moderate Probability"
    return "Low Probability"


def format_revenue(value: int) -> str:
    if value < 0:
        return f"-${abs(value):,}"
    if value == 0:
        return "≤ $0"
    return f"${value:,}"


def revenue_label(value: int, year: int, year_1: int) -> str | None:
    if value <= 0 and year == 2 and year_1 < 0:
        return "Wind-down"
    if value < 0:
        return "Expected Loss"
    if value == 0:
        return "Break-even/Closure"
    return None


def is_wind_down(revenue: RevenueForecast) -> bool:
    return revenue.year_1 < 0 and revenue.year_2 <= 0


def format_analysis(record: AnalysisRecord) -> str:
    revenue = record.revenue_forecast
    units = record.unit_sales_forecast

    lines = [
        f"🎯 Success Probability: {record.success_score}% ({score_label(record.success_score)})",
        f"🏷 Tier: {record.tier_classification.value.upper()}",
        "",
        "💰 Revenue Forecast:",
    ]
    for year, value in enumerate((revenue.year_1, revenue.year_2, revenue.year_3), start=1):
        label = revenue_label(value, year, revenue.year_1)
        suffix = f" ({label})" if label else ""
        lines.append(f"  Year {year}: {format_revenue(value)}{suffix}")
    if is_wind_down(revenue):
        lines.append("  ⚠️ This looks like a wind-down scenario: consider a pivot.")

    lines.append(
        f"📦 Unit Sales: {units.year_1:,} / {units.year_2:,} / {units.year_3:,}"
    )

    lines += ["", "🔍 Why:"]
    for factor in record.key_factors:
        sign = {"positive": "+", "negative": "-"}.get(factor.impact, "•")
        lines.append(f"  {sign} {factor.factor} ({factor.weight:+g}%): {factor.description}")

    # Highest expected impact first
    lines += ["", "📋 Recommendations:"]
    for rec in sorted(record.recommendations, key=lambda r: r.impact_on_score, reverse=True):
        lines.append(f"  [{rec.priority}] {rec.action} ({rec.impact_on_score:+g} pts)")

    lines += ["", *format_competitors(record.competitors)]
    return "\n".join(lines)


def format_competitors(competitors) -> list[str]:
    if not competitors:
        return ["⚔️ Competitors: none found yet. Try /competitors"]
    lines = ["⚔️ Competitors:"]
    for competitor in competitors:
        line = f"  {competitor.name} ({competitor.threat_level} threat): {competitor.description}"
        if competitor.source:
            line += f" [Source: {competitor.source}]"
        lines.append(line)
    return lines


def format_research(research: CompetitorResearch) -> str:
    lines = format_competitors(research.competitors)
    if research.market_status:
        lines += ["", f"📈 Market status: {research.market_status}"]
    if research.recommendation:
        lines += [f"👉 {research.recommendation}"]
    return "\n".join(lines)


def get_session(context: ContextTypes.DEFAULT_TYPE) -> AnalysisSession:
    session = context.user_data.get("session")
    if session is None:
        session = AnalysisSession(
            context.bot_data["reasoner"],
            store=context.bot_data.get("store"),
            templates=context.bot_data["templates"],
        )
        context.user_data["session"] = session
    return session


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Start the conversation and ask for the idea."""
    user = update.effective_user
    await update.message.reply_html(
        rf"Hi {user.mention_html()}! Let's predict how your business idea will do."
    )
    await update.message.reply_text(
        "Describe your business idea in plain English.\n\n"
        "Example: A mobile app that connects local dog walkers with busy pet owners. "
        "Users can book walks, track their dog in real-time via GPS, and pay through "
        "the app. We'll charge a 20% commission per booking.",
        reply_markup=ReplyKeyboardRemove(),
    )
    return IDEA


async def idea(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int | None:
    """Analyze the idea and show the results."""
    session = get_session(context)
    if session.busy:
        await update.message.reply_text(BUSY_REPLY)
        return None

    text = update.message.text or ""
    if not text.strip():
        await update.message.reply_text("Please describe your idea first.")
        return IDEA

    await update.message.reply_text("Thank you! Analyzing your idea, this can take a minute...")
    try:
        record = await session.analyze_idea(text)
    except IntegrationError:
        logger.exception("Analysis failed")
        await update.message.reply_text(
            "Sorry, the analysis failed. Please send your idea again."
        )
        return IDEA

    await update.message.reply_text(format_analysis(record))
    await update.message.reply_text(session.transcript[0].content)
    return CHAT


async def chat(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int | None:
    """Answer a follow-up question about the current analysis."""
    session = get_session(context)
    if session.busy:
        await update.message.reply_text(BUSY_REPLY)
        return None

    text = update.message.text or ""
    if not text.strip():
        return CHAT

    reply = await session.send_chat_message(text)
    await update.message.reply_text(reply)
    return CHAT


async def competitors(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int | None:
    """Run a web scan for competitors of the current idea."""
    session = get_session(context)
    if session.busy:
        await update.message.reply_text(BUSY_REPLY)
        return None

    await update.message.reply_text("Searching for competitors...")
    try:
        research = await session.research_competitors()
    except IntegrationError:
        logger.exception("Competitor research failed")
        await update.message.reply_text("Sorry, the competitor scan failed. Please try again.")
        return CHAT

    await update.message.reply_text(format_research(research))
    return CHAT


async def save(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int | None:
    """Store the current analysis."""
    session = get_session(context)
    if session.busy:
        await update.message.reply_text(BUSY_REPLY)
        return None

    try:
        record_id = session.save()
    except IntegrationError:
        logger.exception("Saving analysis failed")
        await update.message.reply_text("Sorry, the analysis could not be saved.")
        return CHAT

    await update.message.reply_text(f"💾 Analysis saved ({record_id}).")
    return CHAT


async def reset(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Discard the analysis and ask for a new idea."""
    get_session(context).reset_analysis()
    await update.message.reply_text("Analysis cleared. Describe your next idea.")
    return IDEA


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """End the conversation."""
    get_session(context).reset_analysis()
    await update.message.reply_text("Bye! Send /start to analyze another idea.")
    return ConversationHandler.END


def build_application(settings) -> Application:
    application = Application.builder().token(settings.telegram_bot_token).build()
    application.bot_data["reasoner"] = GeminiReasoner(settings, system_prompt=SYSTEM_PROMPT)
    application.bot_data["store"] = JsonFileStore(settings.store_dir)
    application.bot_data["templates"] = load_templates(settings.forecast_templates_path)

    # Add conversation handler
    conv_handler = ConversationHandler(
        entry_points=[CommandHandler("start", start)],
        states={
            IDEA: [MessageHandler(filters.TEXT & ~filters.COMMAND, idea)],
            CHAT: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, chat),
                CommandHandler("competitors", competitors),
                CommandHandler("save", save),
            ],
        },
        fallbacks=[
            CommandHandler("reset", reset),
            CommandHandler("cancel", cancel),
        ],
    )
    application.add_handler(conv_handler)
    return application


def main() -> None:
    settings = load_settings()

    # Enable logging
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, settings.log_level, logging.INFO),
    )
    # set higher logging level for httpx to avoid all GET and POST requests being logged
    logging.getLogger("httpx").setLevel(logging.WARNING)

    application = build_application(settings)

    if settings.dev_mode:
        # Webhook settings
        application.run_webhook(
            listen="0.0.0.0",
            port=settings.port,
            url_path=settings.telegram_bot_token,
            webhook_url=f"{settings.webhook_url}/{settings.telegram_bot_token}",
            drop_pending_updates=True,
        )
    else:
        application.run_polling()


if __name__ == "__main__":
    main()
