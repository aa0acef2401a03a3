from fastapi.templating import Jinja2Templates

from challanbook import TEMPLATES_DIR
from challanbook.utils import format_amount, number_to_words

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["amount"] = format_amount
templates.env.filters["in_words"] = number_to_words
