SYSTEM_PROMPT = "you are a business idea validator"

RULE_EVALUATION = """
Check the following Business Idea against a fixed set of hard market rules:

"{idea}"

BAD IDEA FLAGS (the idea is bad if ANY of these is true):
1. Health/Legal Liability: health risks, legal liability, bodily fluids, privacy breaches or dangerous materials.
2. Shrinking TAM: the total addressable market has shrunk (CAGR below -5%) over the last 3 years.
3. Low Gross Margin: gross margin would stay under 15% at scale.
4. Cultural Revulsion: more than 60% of people would find it disgusting, offensive or unethical.

GOOD IDEA FLAGS (the idea is good only if ALL of these are true):
1. TAM CAGR > 8%: the market grows at least 8% a year.
2. Gross Margin > 45%: 45%+ gross margin is reachable at scale.
3. Google Trends Up: search interest has been rising for 3+ years.
4. Low Competitor Density: fewer than 3 dominant brands hold more than 10% share each.
5. ESG/Regulatory Tailwind: supportive regulation exists (plastic bans, carbon credits, sustainability mandates).

Anything else is a MEDIUM idea.

Put your justification for the bad flags and the good flags in their "details" fields
and your overall verdict in "reasoning". Be objective and use current market data.
"""

TIER_GUIDANCE = {
    "bad": (
        "- Focus on fundamental flaws and why to pivot or abandon\n"
        "- Highlight legal, health or market risks\n"
        "- Recommendations should focus on pivot strategies"
    ),
    "medium": (
        "- Balance strengths and weaknesses\n"
        "- Show a viable path but acknowledge the challenges\n"
        "- Recommendations focus on execution and differentiation"
    ),
    "good": (
        "- Highlight the strong market position and advantages\n"
        "- Focus on scaling and optimization opportunities\n"
        "- Recommendations focus on maximizing the high potential"
    ),
}

TIER_JUSTIFICATION_LABEL = {
    "bad": "Bad Flags Triggered",
    "medium": "Reasoning",
    "good": "Good Flags Met",
}

DETAILED_ANALYSIS = """
You are an expert business analyst. This Business Idea has been PRE-CLASSIFIED as
"{tier_upper}" tier by hard market rules:

"{idea}"

TIER CLASSIFICATION: {tier_upper}
{justification_label}: {justification}

YOUR TASK:
1. Assign a success score within the REQUIRED range: {score_min}% to {score_max}%
2. Give 6-8 key factors explaining the {tier} classification
3. Identify real competitors
4. Give 8 actionable recommendations suited to {tier} tier ideas

FOR {tier_upper} TIER:
{guidance}

The success score MUST be within {score_min}-{score_max}%.
"""

COMPETITOR_RESEARCH = """
Research competitors and similar products for this Business Idea: "{idea}"

Search for:
- Direct competitors
- Similar products on Kickstarter and Indiegogo
- Existing patents or trademarks
- Reddit threads or forums discussing similar ideas
- Existing apps or services

Give the source of each competitor you list, a short market status and an overall recommendation.
"""

SCORE_BAND_GUIDANCE = """
RESPONSE GUIDELINES BASED ON SCORE:

HIGH SCORE (60%+):
- Reinforce strengths and help optimize
- Focus on scaling strategies and execution excellence
- Be encouraging about achievable milestones

MODERATE SCORE (30-60%):
- Address the key weaknesses first
- Give clear, actionable improvements and prioritize what moves the needle most
- Be realistic about the effort required but show the path forward

LOW SCORE (<30%):
- If fundamentally flawed: recommend a pivot or major redesign
- If salvageable: fix the business model first
- Consider whether shutdown or pivot is the best advice

THIS IDEA IS IN THE {band} BAND.
"""

ADVISOR = """
You are an experienced business strategy advisor. Be realistic but constructive.

BUSINESS IDEA: "{idea}"

CURRENT ANALYSIS:
- Success Score: {score}%
- Year 1 Revenue: ${year_1_revenue:,}
- Key Factors: {key_factors}
- Current Recommendations: {recommendations}

CONVERSATION SO FAR:
{history}

USER QUESTION: {question}
{guidance}
RESPONSE FORMAT:
- Direct answer to the question
- 3-5 specific, actionable recommendations ranked by impact
- For each: why it helps, how to do it, and the realistic expected impact ($ or %)
- Concrete numbers and timeframes

Max 3 paragraphs. Be conversational, data-driven and proportionally encouraging based on the idea's actual merit.
"""

CHAT_GREETING = """I can help you improve your success odds! Try asking:
• "How do I raise my odds to 85%?"
• "What pricing strategy works best?"
• "Should I focus on marketing or product first?"
• "What's my biggest risk?\""""

CHAT_FALLBACK = "Sorry, I encountered an error. Please try again."
