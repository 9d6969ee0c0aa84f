"""Prompt Builders — render a TravelPlan into a cost-estimation prompt.

Invariants:
    - All builders are PURE: TravelPlan in, str out, no IO
    - Every prompt states cities, duration, dates, necessity preferences,
      and demands the JSON object {"flight", "roomsPerNight", "foodDaily"}
    - Builders are passed in explicitly (PromptBuilder); nothing overwrites a
      builder on a shared service instance

Design Decisions:
    - Callable Protocol over ABC: any function with the right signature is a strategy
    - PROMPT_VARIANTS registry keyed by name: the API selects a variant per request
"""

from typing import Protocol

from piggybank.core.travel_plan import TravelPlan

LONG_STAY_DAYS = 180

_JSON_CONTRACT = """{
  "flight": estimated_flight_cost_number,
  "roomsPerNight": estimated_room_cost_per_night_number,
  "foodDaily": estimated_daily_food_cost_number
}"""


class PromptBuilder(Protocol):
    """Strategy contract — renders one travel plan into a prompt string."""
    def __call__(self, plan: TravelPlan) -> str: ...


def _accommodation_text(plan: TravelPlan) -> str:
    if plan.necessity.accommodation:
        return "hotel/motel accommodation"
    return "no accommodation needed (staying with friends/family or camping)"


def _dining_text(plan: TravelPlan) -> str:
    if plan.necessity.dining:
        return "restaurant dining and meals"
    return "no dining costs (self-catering or included meals)"


def _trip_details(plan: TravelPlan) -> str:
    return (
        f"- From: {plan.from_city}\n"
        f"- To: {plan.to_city}\n"
        f"- Duration: {plan.duration_days} days\n"
        f"- Departure: {plan.from_date:%a %b %d %Y}\n"
        f"- Return: {plan.to_date:%a %b %d %Y}"
    )


def _necessity_block(plan: TravelPlan) -> str:
    return (
        "NECESSITY PREFERENCES:\n"
        f"- Accommodation: {_accommodation_text(plan)}\n"
        f"- Dining: {_dining_text(plan)}"
    )


def build_cost_estimation_prompt(plan: TravelPlan) -> str:
    """Default prompt: trip details, preferences, strict JSON reply."""
    return f"""You are a helpful AI assistant that provides realistic cost estimates for travel plans.

TRIP DETAILS:
{_trip_details(plan)}

{_necessity_block(plan)}

Please provide realistic cost estimates in USD for:
1. Round-trip flight MEDIAN cost between these cities
2. MEDIAN cost per night for accommodation (if accommodation is needed)
3. MEDIAN daily food/dining costs (if dining is needed)

If accommodation is not needed, set roomsPerNight to 0.
If dining is not needed, set foodDaily to 0.

Return ONLY a JSON object with this exact structure:
{_JSON_CONTRACT}"""


def build_explicit_validation_prompt(plan: TravelPlan) -> str:
    """Variant: validation rules checked before estimating."""
    long_stay = plan.duration_days > LONG_STAY_DAYS
    return f"""You are a helpful AI assistant that provides realistic cost estimates for travel plans.

CRITICAL VALIDATION RULES - CHECK THESE FIRST:
1. If departure and return cities are the same, set flight cost to 0
2. If return date is before departure date, set all costs to 0
3. If duration exceeds {LONG_STAY_DAYS} days, apply long-term discount factors (50% for accommodation, 25% for food)

TRIP DETAILS:
{_trip_details(plan)}

{_necessity_block(plan)}

VALIDATION CHECK:
- Same cities? {"YES - Set flight to 0" if plan.same_city else "NO - Proceed normally"}
- Valid dates? {"YES" if plan.to_date >= plan.from_date else "NO - Set all costs to 0"}
- Long duration? {"YES - Apply discounts" if long_stay else "NO - Use standard rates"}

Please provide realistic cost estimates in USD for:
1. Round-trip flight MEDIAN cost between these cities
2. MEDIAN cost per night for accommodation (if accommodation is needed)
3. MEDIAN daily food/dining costs (if dining is needed)

If accommodation is not needed, set roomsPerNight to 0.
If dining is not needed, set foodDaily to 0.

RETURN YOUR RESPONSE as a JSON OBJECT with this exact structure:
{_JSON_CONTRACT}

IMPORTANT: Validate the scenario first INTERNALLY (DON'T INCLUDE THIS IN YOUR OUTPUT), then provide appropriate estimates."""


def _trip_context(plan: TravelPlan) -> str:
    if plan.same_city:
        return "same-city day trip (no flight needed)"
    if plan.duration_days > LONG_STAY_DAYS:
        return "extended long-term stay (apply long-term pricing)"
    if plan.duration_days <= 1:
        return "same-day trip (minimal accommodation needs)"
    return "standard trip"


def build_context_aware_prompt(plan: TravelPlan) -> str:
    """Variant: classify the trip first, then apply context-specific rules."""
    return f"""You are a travel cost estimation expert. Analyze the trip context first, then provide appropriate estimates.

TRIP ANALYSIS:
- Context: {_trip_context(plan)}
{_trip_details(plan)}

{_necessity_block(plan)}

REASONING PROCESS:
1. First, identify any logical impossibilities (same city + same day, return before departure)
2. Consider trip duration implications (same-day, short-term, long-term)
3. Use realistic pricing based on current market rates
4. Apply appropriate discounts for extended stays

CONTEXT-SPECIFIC RULES:
- Same-city trips: Flight cost = 0
- Same-day trips: Minimal accommodation needs
- Long-term stays (>6 months): Apply 40-60% accommodation discounts, 20-30% food discounts

Return as JSON:
{_JSON_CONTRACT}"""


def build_error_handling_prompt(plan: TravelPlan) -> str:
    """Variant: step-by-step validation with conservative fallbacks."""
    return f"""You are a reliable travel cost estimator. Follow these steps exactly:

STEP 1: VALIDATE SCENARIO
- Same departure/arrival city? Set flight = 0
- Return date before departure? Set all costs = 0
- Duration > 365 days? Use conservative estimates

STEP 2: TRIP DETAILS
{_trip_details(plan)}

STEP 3: {_necessity_block(plan)}

STEP 4: ESTIMATE in USD (flight round trip, accommodation per night, food per day).
Never exceed 100000 for any field. Use 0 for costs that are not needed.

MANDATORY JSON RESPONSE FORMAT:
{{
  "flight": number,
  "roomsPerNight": number,
  "foodDaily": number
}}

ERROR HANDLING: If you cannot provide accurate estimates, return conservative estimates rather than failing."""


PROMPT_VARIANTS: dict[str, PromptBuilder] = {
    "default": build_cost_estimation_prompt,
    "explicit_validation": build_explicit_validation_prompt,
    "context_aware": build_context_aware_prompt,
    "error_handling": build_error_handling_prompt,
}
