import pytest

from influxline.utils import settings

ANNOTATED_RESPONSE = (
    "#datatype,string,long,dateTime:RFC3339,double,string,string,string\r\n"
    "#group,false,false,false,false,true,true,true\r\n"
    "#default,_result,,,,,,\r\n"
    ",result,table,_time,_value,_field,_measurement,city\r\n"
    ",,0,2020-10-10T09:00:00Z,21.5,value,temperature,Brussels\r\n"
    ",,0,2020-10-10T10:00:00Z,22.1,value,temperature,Brussels\r\n"
    "\r\n"
    "#datatype,string,long,dateTime:RFC3339,long,string,string,string\r\n"
    "#group,false,false,false,false,true,true,true\r\n"
    "#default,_result,,,,,,\r\n"
    ",result,table,_time,_value,_field,_measurement,city\r\n"
    ",,1,2020-10-10T09:00:00Z,28,count,temperature,Madrid\r\n"
    "\r\n"
    "\r\n"
)


@pytest.fixture
def annotated_response():
    return ANNOTATED_RESPONSE


@pytest.fixture(autouse=True)
def reset_settings():
    verify_ssl, timeout = settings.verify_ssl, settings.timeout
    yield
    settings.verify_ssl, settings.timeout = verify_ssl, timeout
