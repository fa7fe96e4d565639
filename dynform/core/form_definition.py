from dynform.schemas.form_schema import (
    DateField,
    DateRules,
    FormSchema,
    MultiSelectField,
    MultiSelectRules,
    NumberField,
    NumberRules,
    SelectField,
    SwitchField,
    TextareaField,
    TextareaRules,
    TextField,
    TextRules,
)

# The one form this deployment serves. Built at import time so a malformed
# definition fails startup instead of a request.
ONBOARDING_FORM = FormSchema(
    title="Employee Onboarding",
    fields=(
        TextField(
            name="fullName",
            label="Full Name",
            required=True,
            validations=TextRules(min_length=2, pattern=r"^[a-zA-Z\s]*$"),
        ),
        NumberField(
            name="age",
            label="Age",
            required=True,
            validations=NumberRules(min=18, max=65),
        ),
        SelectField(
            name="department",
            label="Department",
            required=True,
            options=("HR", "Engineering", "Marketing"),
        ),
        MultiSelectField(
            name="skills",
            label="Skills",
            options=("React", "Node", "Python", "Java"),
            validations=MultiSelectRules(min_selected=1, max_selected=3),
        ),
        DateField(
            name="dateOfJoining",
            label="Date of Joining",
            required=True,
            validations=DateRules(min_date="today"),
        ),
        TextareaField(
            name="bio",
            label="Bio",
            validations=TextareaRules(max_length=200),
        ),
        SwitchField(
            name="termsAccepted",
            label="Terms Accepted",
            required=True,
        ),
    ),
)


def get_form_schema() -> FormSchema:
    return ONBOARDING_FORM
