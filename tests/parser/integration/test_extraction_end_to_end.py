"""
End-to-end tests: T-SQL text in, dependency edges out.
"""


class TestProcedures:
    """Test edges of stored procedures."""

    def test_mixed_body(self, edges_of):
        sql = """
        CREATE PROCEDURE dbo.LoadOrders
        AS
        BEGIN
            SET NOCOUNT ON;
            INSERT INTO dbo.Orders (Id, Total) VALUES (1, 10);
            UPDATE o SET o.Total = 0 FROM dbo.Orders o WHERE o.Id = 1;
            DELETE FROM dbo.Staging;
            TRUNCATE TABLE dbo.Log;
            EXEC dbo.Notify @id = 1;
        END
        GO
        """
        assert edges_of(sql) == [
            ("dbo.LoadOrders", "dbo.Orders", "INSERT"),
            ("dbo.LoadOrders", "dbo.Orders", "UPDATE"),
            ("dbo.LoadOrders", "dbo.Staging", "DELETE"),
            ("dbo.LoadOrders", "dbo.Log", "TRUNC"),
            ("dbo.LoadOrders", "dbo.Notify", "EXEC"),
        ]

    def test_single_insert(self, edges_of):
        sql = "CREATE PROCEDURE S.P AS INSERT INTO S.T (a, b) VALUES (1, 2)"
        assert edges_of(sql) == [("S.P", "S.T", "INSERT")]

    def test_table_variable_alias_suppressed(self, edges_of):
        sql = """
        CREATE PROCEDURE dbo.Cleanup AS
        BEGIN
            DECLARE @ids TABLE (Id INT);
            UPDATE v SET v.Id = 0 FROM @ids AS v;
            DELETE @ids;
        END
        """
        assert edges_of(sql) == []

    def test_merge(self, edges_of):
        sql = """
        CREATE PROCEDURE etl.SyncCustomers AS
        MERGE INTO dbo.Customers AS tgt
        USING staging.Customers AS src ON tgt.Id = src.Id
        WHEN MATCHED THEN UPDATE SET tgt.Name = src.Name
        WHEN NOT MATCHED THEN INSERT (Id, Name) VALUES (src.Id, src.Name);
        """
        assert edges_of(sql) == [
            ("etl.SyncCustomers", "dbo.Customers", "UPDATE"),
            ("etl.SyncCustomers", "dbo.Customers", "INSERT"),
        ]

    def test_dynamic_and_variable_exec(self, edges_of):
        sql = """
        CREATE PROCEDURE dbo.Dyn AS
        BEGIN
            EXEC ('DELETE FROM dbo.A');
            EXEC @proc;
            EXEC sp_executesql @sql;
        END
        """
        assert edges_of(sql) == [
            ("dbo.Dyn", "EXEC()", "EXEC"),
            ("dbo.Dyn", "{MISSING}.sp_executesql", "EXEC"),
        ]

    def test_branches_all_contribute(self, edges_of):
        sql = """
        CREATE PROCEDURE dbo.Branchy AS
        IF @x = 1
            INSERT INTO dbo.A (Id) VALUES (1)
        ELSE
            DELETE FROM dbo.B
        """
        assert edges_of(sql) == [
            ("dbo.Branchy", "dbo.A", "INSERT"),
            ("dbo.Branchy", "dbo.B", "DELETE"),
        ]

    def test_output_into(self, edges_of):
        sql = """
        CREATE PROCEDURE dbo.Drain AS
        DELETE FROM dbo.Queue OUTPUT deleted.Id INTO dbo.Archive (Id) WHERE Id < 10;
        """
        assert edges_of(sql) == [
            ("dbo.Drain", "dbo.Queue", "DELETE"),
            ("dbo.Drain", "dbo.Archive", "INSERT"),
        ]

    def test_begin_dialog(self, edges_of):
        sql = """
        CREATE PROCEDURE dbo.SendMsg AS
        BEGIN
            DECLARE @h UNIQUEIDENTIFIER;
            BEGIN DIALOG CONVERSATION @h
                FROM SERVICE [InitService]
                TO SERVICE 'TargetService'
                ON CONTRACT [OrderContract];
            BEGIN DIALOG @h FROM SERVICE [InitService] TO SERVICE 'TargetService';
        END
        """
        assert edges_of(sql) == [
            ("dbo.SendMsg", "InitService.OrderContract", "QUEUE"),
            ("dbo.SendMsg", "InitService.DEFAULT", "QUEUE"),
        ]

    def test_insert_exec_and_temp_tables(self, edges_of):
        sql = "CREATE PROCEDURE dbo.P AS INSERT INTO #results EXEC dbo.GetData"
        assert edges_of(sql) == [
            ("dbo.P", "{MISSING}.#results", "INSERT"),
            ("dbo.P", "dbo.GetData", "EXEC"),
        ]
        assert edges_of(sql, exclude_temp_tables=True) == [("dbo.P", "dbo.GetData", "EXEC")]

    def test_alter_only_with_option(self, edges_of):
        sql = "ALTER PROCEDURE dbo.P AS DELETE FROM dbo.A"
        assert edges_of(sql) == []
        assert edges_of(sql, include_alter=True) == [("dbo.P", "dbo.A", "DELETE")]

    def test_alias_matching_is_case_sensitive(self, edges_of):
        sql = "CREATE PROCEDURE dbo.P AS UPDATE T SET x = 1 FROM dbo.Tab t"
        assert edges_of(sql) == [("dbo.P", "{MISSING}.T", "UPDATE")]
        assert edges_of(sql, ignore_alias_case=True) == [("dbo.P", "dbo.Tab", "UPDATE")]

    def test_name_with_trailing_dot_has_no_edge(self, edges_of):
        sql = "CREATE PROCEDURE dbo.P AS INSERT INTO dbo. VALUES (1)"
        assert edges_of(sql) == []


class TestTriggers:
    """Test edges of triggers."""

    def test_trigger_edge_first(self, edges_of):
        sql = """
        CREATE TRIGGER Trg1 ON S.T
        AFTER INSERT, UPDATE
        AS
        BEGIN
            INSERT INTO audit.Log (Id) SELECT Id FROM inserted
        END
        """
        assert edges_of(sql) == [
            ("S.T", "{MISSING}.Trg1", "TRIG"),
            ("{MISSING}.Trg1", "audit.Log", "INSERT"),
        ]

    def test_database_trigger_has_no_trig_edge(self, edges_of):
        sql = """
        CREATE TRIGGER dbo.trgDdl ON DATABASE FOR CREATE_TABLE AS
        INSERT INTO dbo.DdlLog (EventTime) VALUES (GETDATE())
        """
        assert edges_of(sql) == [("dbo.trgDdl", "dbo.DdlLog", "INSERT")]


class TestScripts:
    """Test multi-batch scripts."""

    def test_objects_in_order_and_other_batches_ignored(self, edges_of):
        sql = """
        CREATE TABLE dbo.T1 (a INT)
        GO
        CREATE PROCEDURE dbo.P1 AS
        INSERT INTO dbo.T1 (a) VALUES (1)
        GO
        CREATE PROCEDURE dbo.P2 AS
        EXEC dbo.P1
        GO
        """
        assert edges_of(sql) == [
            ("dbo.P1", "dbo.T1", "INSERT"),
            ("dbo.P2", "dbo.P1", "EXEC"),
        ]

    def test_deterministic(self, edges_of):
        sql = "CREATE PROCEDURE dbo.P AS BEGIN DELETE FROM dbo.A; EXEC dbo.B; END"
        assert edges_of(sql) == edges_of(sql)
