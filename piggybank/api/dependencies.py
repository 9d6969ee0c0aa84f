"""Route Dependencies — resolve the TripCostEstimation service for a request.

Invariants:
    - The service is built once in the app lifespan and stored on app.state
    - Tests replace it through app.dependency_overrides[get_estimation_service]
"""

from fastapi import Request

from piggybank.services.trip_cost_estimation import TripCostEstimation


def get_estimation_service(request: Request) -> TripCostEstimation:
    return request.app.state.estimation_service
