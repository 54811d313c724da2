from .http_response import api_response as api_response
from .http_response import api_error_response as api_error_response
from .validators import to_decimal as to_decimal
