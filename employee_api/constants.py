"""Shared constants for the employee API."""

# Aggregation
TOP_SALARIES_LIMIT = 10
FETCH_WORKERS = 3
JSON_SUFFIX = ".json"

# HTTP envelope
CONTENT_TYPE_JSON = "application/json"
RESPONSE_HEADERS = {"Content-Type": CONTENT_TYPE_JSON}

# Stored procedures backing the employee store
SP_GET_ALL_EMPLOYEES = "CALL sp_get_all_employees()"
SP_GET_EMPLOYEE_BY_ID = "CALL sp_get_employee_by_id(:id)"
SP_CREATE_EMPLOYEE = (
    "CALL sp_create_employee(:name, :position, :salary, :hire_date, :department)"
)
SP_UPDATE_EMPLOYEE = (
    "CALL sp_update_employee("
    ":id, :name, :position, :salary, :hire_date, :department)"
)
SP_DELETE_EMPLOYEE = "CALL sp_delete_employee(:id)"

# Set by the Lambda runtime; its presence marks a deployed process
LAMBDA_FUNCTION_ENV = "AWS_LAMBDA_FUNCTION_NAME"
