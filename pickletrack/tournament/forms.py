"""Forms for the tournament blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField
from wtforms.validators import DataRequired

from pickletrack.constants import TOURNAMENT_STATUSES


class TournamentStatusForm(FlaskForm):
    """Form for manually changing a tournament's status."""

    status = SelectField(
        "Status",
        choices=[(s, s.replace("_", " ").title()) for s in TOURNAMENT_STATUSES],
        validators=[DataRequired()],
    )
