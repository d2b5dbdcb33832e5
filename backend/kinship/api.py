from ninja import NinjaAPI

from kinship.views.case_views import case_router
from kinship.views.compare_views import compare_router
from kinship.views.upload_views import upload_router

api = NinjaAPI(title="Kinship marker database")

api.add_router("/kinship/", case_router)
api.add_router("/kinship/", compare_router)
api.add_router("/kinship/", upload_router)
