"""Forms for the league blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField
from wtforms.validators import DataRequired

from pickletrack.constants import LEAGUE_STATUSES


class LeagueStatusForm(FlaskForm):
    """Form for manually changing a league's status."""

    status = SelectField(
        "Status",
        choices=[(s, s.title()) for s in LEAGUE_STATUSES],
        validators=[DataRequired()],
    )
