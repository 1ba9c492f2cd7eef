"""Forms for recording payments."""

from flask_wtf import FlaskForm
from wtforms import DecimalField, SelectField, StringField
from wtforms.validators import InputRequired, Length, NumberRange, Optional

from pickletrack.constants import DEFAULT_PAYMENT_METHOD, PAYMENT_METHODS


class PaymentForm(FlaskForm):
    """Form for recording an offline payment for one participant."""

    amount = DecimalField(
        "Amount",
        places=2,
        validators=[InputRequired(), NumberRange(min=0, message="Amount cannot be negative.")],
    )

    method = SelectField(
        "Payment Method",
        choices=[(method, method.title()) for method in PAYMENT_METHODS],
        default=DEFAULT_PAYMENT_METHOD,
        validators=[Optional()],
    )

    notes = StringField("Notes", validators=[Optional(), Length(max=500)])
