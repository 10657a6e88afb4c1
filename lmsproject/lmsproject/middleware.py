"""
Custom middleware to handle frame options for uploaded files
"""
from django.conf import settings


class EmbeddableUploadsMiddleware:
    """
    Allow files served from MEDIA_URL to be framed.
    PDF lessons are displayed in an iframe by the frontend, everything
    else keeps the default X-Frame-Options protection.
    """
    def __init__(self, get_response):
        self.get_response = get_response
        self.prefix = settings.MEDIA_URL

    def __call__(self, request):
        response = self.get_response(request)

        if request.path.startswith(self.prefix):
            response.xframe_options_exempt = True
            if 'X-Frame-Options' in response:
                del response['X-Frame-Options']

        return response
