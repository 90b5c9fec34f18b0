import logging

from sheetdb import SheetConnector

from examples.dummy_source import DummySource, payroll_grid

ADDRESS = "sheetdb://doc=(id=payroll-2021,range=Payroll!A1:C50)/hr"


def main():
    logging.basicConfig(level=logging.INFO)

    src = DummySource()
    src.publish("payroll-2021", "Payroll!A1:C50", payroll_grid([90000.0, 105000.0]))

    with SheetConnector(source=src) as connector:
        cur = connector.connect(ADDRESS)
        print(cur.execute('SELECT COUNT(*), SUM("Salary") FROM "hr"."Payroll"').fetchall())

        # unchanged upstream: no rebuild
        connector.connect(ADDRESS)
        print("Unchanged:", connector.last_report.unchanged)

        src.publish("payroll-2021", "Payroll!A1:C50", payroll_grid([90000.0, 105000.0, 87000.0]))
        connector.connect(ADDRESS)
        print(connector.read_table("hr", "Payroll"))


if __name__ == "__main__":
    main()
