import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import main


class TestMain:
    def test_outputs_accounts(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 5.0",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,5.5000,0.0000,5.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        )
        assert "Processed: 4, Failed: 1" in captured.err

    def test_chargeback_output(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,10.0\ndispute,1,1,\nchargeback,1,1,\n")

        assert main([str(csv_file)]) == 0
        assert capsys.readouterr().out == (
            "client,available,held,total,locked\n"
            "1,0.0000,0.0000,0.0000,true\n"
        )

    def test_usage_error(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_wrong_extension(self, tmp_path, capsys):
        txt_file = tmp_path / "transactions.txt"
        txt_file.write_text("type,client,tx,amount\n")

        assert main([str(txt_file)]) == 1
        assert "expected a .csv file" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_large_amounts(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type,client,tx,amount",
            "deposit,1,1,999999999999999999999999.9999",
            "deposit,2,2,10000000000000000000000000",
            "deposit,2,3,1.5",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,999999999999999999999999.9999,0.0000,999999999999999999999999.9999,false\n"
            "2,1.5000,0.0000,1.5000,false\n"
        )
        assert "Processed: 2, Failed: 1" in captured.err
